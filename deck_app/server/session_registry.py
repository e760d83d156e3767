"""Per-session deck and answer state shared between API requests."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import logging
import random
from threading import Lock

from deck_app.constants.network_constants import MAX_ACTIVE_SESSIONS
from deck_app.core.errors import StoreError
from deck_app.core.models import Question
from deck_app.core.services.answer_store import AnswerStore
from deck_app.core.services.deck_controller import DeckController
from deck_app.store.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionState:
    """Deck controller and answer client owned by one browser session.

    Hold ``lock`` around any work on ``deck`` or ``answers``.
    """

    session_id: str
    deck: DeckController
    answers: AnswerStore
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)


class SessionRegistry:
    """Creates session state lazily and hands the same objects back afterwards.

    At most ``max_sessions`` sessions are kept; the least recently used one is
    dropped when a new session would exceed the limit.
    """

    def __init__(
        self,
        catalog: Sequence[Question],
        record_store: RecordStore,
        rng_factory: Callable[[], random.Random] = random.Random,
        max_sessions: int = MAX_ACTIVE_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._lock = Lock()
        self._catalog = tuple(catalog)
        self._record_store = record_store
        self._rng_factory = rng_factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, SessionState] = OrderedDict()

    @property
    def catalog(self) -> tuple[Question, ...]:
        return self._catalog

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    def get(self, session_id: str) -> SessionState:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is not None:
                self._sessions.move_to_end(session_id)
                return state
            state = SessionState(
                session_id=session_id,
                deck=DeckController(self._catalog, rng=self._rng_factory()),
                answers=AnswerStore(self._record_store, session_id),
            )
            self._sessions[session_id] = state
            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted idle session %s", evicted)
            # Held until the first load finishes.
            state.lock.acquire()

        try:
            state.answers.load_mine()
        except StoreError:
            # Kept in answers.last_error; the deck stays usable.
            logger.info("Initial answer load failed for session %s", session_id)
        finally:
            state.lock.release()
        return state

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
