"""Domain models for the conversation deck."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class Question:
    """Conversation prompt from the static catalog."""

    id: int
    text: str
    category: str | None = None


@dataclass(frozen=True, slots=True)
class Category:
    """Category tag together with its display label and catalog size."""

    id: str
    name: str
    count: int


@dataclass(frozen=True, slots=True)
class DeckState:
    """Read-only snapshot of the deck handed to callers."""

    question: Question | None
    position: int
    total: int
    shuffled: bool
    active_categories: frozenset[str]

    @property
    def progress_percent(self) -> float:
        if not self.total:
            return 0.0
        return (self.position + 1) / self.total * 100


@dataclass(slots=True)
class Answer:
    """Free-text answer saved by one session for one question."""

    id: str
    question_id: int
    question_text: str
    answer_text: str
    session_id: str
    created_at: datetime
    updated_at: datetime
    category: str | None = None
    author_name: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Answer":
        """Build an answer from a record-store row."""
        created_at = parse_timestamp(record.get("created_at"))
        return cls(
            id=str(record["id"]),
            question_id=int(record["question_id"]),
            question_text=record.get("question_text") or "",
            answer_text=record.get("answer_text") or "",
            session_id=record.get("user_session") or "",
            created_at=created_at,
            updated_at=parse_timestamp(record.get("updated_at"), default=created_at),
            category=record.get("category") or None,
            author_name=record.get("user_name") or None,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question_id": self.question_id,
            "question_text": self.question_text,
            "answer_text": self.answer_text,
            "category": self.category,
            "user_session": self.session_id,
            "user_name": self.author_name,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }


@dataclass(slots=True)
class PersonAnswers:
    """All answers written under one author name, newest first."""

    display_name: str
    answers: list[Answer] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.answers)

    @property
    def last_answered_at(self) -> datetime | None:
        return self.answers[0].created_at if self.answers else None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: Any, default: datetime | None = None) -> datetime:
    """Parse an ISO 8601 value from the store into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif default is not None:
        return default
    else:
        raise ValueError(f"Missing timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
