"""Client that keeps one session's answers in sync with the record store."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
from typing import TypeVar

from deck_app.constants.store_constants import (
    COLUMN_CREATED_AT,
    COLUMN_ID,
    COLUMN_QUESTION_ID,
    COLUMN_SESSION,
)
from deck_app.core.errors import NotFound, StoreError, ValidationError
from deck_app.core.models import Answer, PersonAnswers, format_timestamp, utc_now
from deck_app.core.services.answer_views import group_by_author
from deck_app.store.record_store import Order, RecordStore

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_NEWEST_FIRST = Order(COLUMN_CREATED_AT, descending=True)


class AnswerStore:
    """Saves, deletes and caches the answers written by one session.

    The cache only changes after the store confirms a call; a failing call
    raises a ``StoreError`` subclass, remembers it in ``last_error`` and leaves
    the cache as it was.
    """

    def __init__(
        self,
        store: RecordStore,
        session_id: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not session_id:
            raise ValueError("A session id is required.")
        self._store = store
        self._session_id = session_id
        self._clock = clock
        self._answers: list[Answer] = []
        self._loaded: bool = False
        self.last_error: StoreError | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def answers(self) -> list[Answer]:
        return list(self._answers)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load_mine(self) -> list[Answer]:
        records = self._call(
            lambda: self._store.query({COLUMN_SESSION: self._session_id}, _NEWEST_FIRST)
        )
        self._answers = [Answer.from_record(record) for record in records]
        self._loaded = True
        return self.answers

    def save(
        self,
        question_id: int,
        question_text: str,
        answer_text: str,
        category: str | None = None,
        author_name: str | None = None,
    ) -> Answer:
        """Create or update this session's answer for ``question_id``."""
        cleaned_text = answer_text.strip()
        if not cleaned_text:
            raise ValidationError("Answer text must not be empty.")
        cleaned_author = (author_name or "").strip() or None

        record = self._call(
            lambda: self._upsert(question_id, question_text, cleaned_text, category, cleaned_author)
        )
        saved = Answer.from_record(record)

        # One cached answer per question, even when the row was replaced remotely.
        index = next(
            (i for i, a in enumerate(self._answers)
             if a.id == saved.id or a.question_id == saved.question_id),
            -1,
        )
        self._answers = [
            a for a in self._answers
            if a.id != saved.id and a.question_id != saved.question_id
        ]
        self._answers.insert(max(index, 0), saved)
        return saved

    def delete(self, answer_id: str) -> bool:
        """Delete one of this session's answers; returns False if nothing matched."""
        removed = self._call(
            lambda: self._store.delete_where({COLUMN_ID: answer_id, COLUMN_SESSION: self._session_id})
        )
        self._answers = [answer for answer in self._answers if answer.id != answer_id]
        if not removed:
            logger.info("Delete of answer %s matched no row for session %s", answer_id, self._session_id)
            return False
        return True

    def find_by_question(self, question_id: int) -> Answer | None:
        return next((a for a in self._answers if a.question_id == question_id), None)

    def fetch_community(self) -> list[PersonAnswers]:
        """Group every session's answers by author name."""
        records = self._call(lambda: self._store.query({}, _NEWEST_FIRST))
        return group_by_author(Answer.from_record(record) for record in records)

    def _upsert(
        self,
        question_id: int,
        question_text: str,
        answer_text: str,
        category: str | None,
        author_name: str | None,
    ) -> dict:
        now = format_timestamp(self._clock())
        existing = self._store.query(
            {COLUMN_SESSION: self._session_id, COLUMN_QUESTION_ID: question_id}
        )
        if existing:
            try:
                return self._store.update_by_id(
                    str(existing[0][COLUMN_ID]),
                    {"answer_text": answer_text, "user_name": author_name, "updated_at": now},
                )
            except NotFound:
                logger.info("Answer for question %s vanished before update; inserting", question_id)

        return self._store.insert(
            {
                COLUMN_QUESTION_ID: question_id,
                "question_text": question_text,
                "answer_text": answer_text,
                "category": category,
                COLUMN_SESSION: self._session_id,
                "user_name": author_name,
                COLUMN_CREATED_AT: now,
                "updated_at": now,
            }
        )

    def _call(self, operation: Callable[[], _T]) -> _T:
        try:
            result = operation()
        except StoreError as exc:
            logger.warning("Record store call failed for session %s: %s", self._session_id, exc)
            self.last_error = exc
            raise
        self.last_error = None
        return result
