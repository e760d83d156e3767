"""Service for navigating, filtering and shuffling the question deck."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import random

from deck_app.core.errors import EmptyDeck
from deck_app.core.models import DeckState, Question


class DeckController:
    """Owns the active question sequence and the cursor into it."""

    def __init__(self, catalog: Sequence[Question], rng: random.Random | None = None) -> None:
        self._catalog: tuple[Question, ...] = tuple(catalog)
        self._rng = rng or random.Random()
        self._items: list[Question] = list(self._catalog)
        self._cursor: int = 0
        self._shuffled: bool = False
        self._active_categories: frozenset[str] = frozenset()

    @property
    def items(self) -> list[Question]:
        return list(self._items)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def shuffled(self) -> bool:
        return self._shuffled

    @property
    def active_categories(self) -> frozenset[str]:
        return self._active_categories

    def __len__(self) -> int:
        return len(self._items)

    def current(self) -> Question | None:
        if not self._items:
            return None
        return self._items[self._cursor]

    def advance(self) -> Question:
        self._require_items()
        self._cursor = (self._cursor + 1) % len(self._items)
        return self._items[self._cursor]

    def retreat(self) -> Question:
        self._require_items()
        if self._cursor == 0:
            self._cursor = len(self._items) - 1
        else:
            self._cursor -= 1
        return self._items[self._cursor]

    def go_to(self, index: int) -> Question:
        if not 0 <= index < len(self._items):
            raise IndexError(f"Question index {index} out of range")
        self._cursor = index
        return self._items[index]

    def shuffle(self) -> None:
        """Draw a fresh permutation of the current items and rewind."""
        shuffled = list(self._items)
        self._rng.shuffle(shuffled)
        self._items = shuffled
        self._cursor = 0
        self._shuffled = True

    def reset(self) -> None:
        """Restore catalog order for the active filter."""
        self._items = self._filtered(self._active_categories)
        self._cursor = 0
        self._shuffled = False

    def apply_filter(self, categories: Iterable[str]) -> None:
        """Restrict the deck to ``categories`` and shuffle the result.

        An empty selection means the full catalog.
        """
        self._active_categories = frozenset(categories)
        items = self._filtered(self._active_categories)
        self._rng.shuffle(items)
        self._items = items
        self._cursor = 0
        self._shuffled = True

    def set_shuffle_seed(self, seed: int | None) -> None:
        self._rng.seed(seed)

    def state(self) -> DeckState:
        return DeckState(
            question=self.current(),
            position=self._cursor,
            total=len(self._items),
            shuffled=self._shuffled,
            active_categories=self._active_categories,
        )

    def _filtered(self, categories: frozenset[str]) -> list[Question]:
        if not categories:
            return list(self._catalog)
        return [question for question in self._catalog if question.category in categories]

    def _require_items(self) -> None:
        if not self._items:
            raise EmptyDeck("The deck has no questions for the selected categories.")
