from datetime import datetime, timedelta, timezone
import random

import pytest

from deck_app.constants.store_constants import ANSWER_UNIQUE_COLUMNS
from deck_app.core.models import Question
from deck_app.core.services.answer_store import AnswerStore
from deck_app.core.services.deck_controller import DeckController
from deck_app.store.memory_store import MemoryRecordStore


class FakeClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self, start=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def catalog():
    return [
        Question(id=1, text="What made you smile today?", category="exploration"),
        Question(id=2, text="Where would you live for a year?", category="exploration"),
        Question(id=3, text="What do you dream of building?", category="dreams"),
        Question(id=4, text="Who do you hope to become?", category="dreams"),
        Question(id=5, text="What are you most afraid of losing?", category="fears"),
        Question(id=6, text="What is a question without a home?", category=None),
    ]


@pytest.fixture
def deck(catalog):
    return DeckController(catalog, rng=random.Random(1234))


@pytest.fixture
def record_store():
    return MemoryRecordStore(unique_together=[ANSWER_UNIQUE_COLUMNS])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def answer_store(record_store, clock):
    return AnswerStore(record_store, "session_mine", clock=clock)


@pytest.fixture
def other_store(record_store, clock):
    return AnswerStore(record_store, "session_other", clock=clock)
