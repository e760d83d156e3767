"""Category metadata derived from the loaded catalog."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from deck_app.constants.deck_constants import CATEGORY_NAMES
from deck_app.core.models import Category, Question


def category_counts(catalog: Sequence[Question]) -> dict[str, int]:
    return dict(Counter(q.category for q in catalog if q.category))


def category_summary(catalog: Sequence[Question]) -> list[Category]:
    """Return known categories in display order, then any extra tags found."""
    counts = category_counts(catalog)
    ordered = list(CATEGORY_NAMES) + sorted(tag for tag in counts if tag not in CATEGORY_NAMES)
    return [
        Category(id=tag, name=category_name(tag), count=counts.get(tag, 0))
        for tag in ordered
    ]


def category_name(category: str | None) -> str:
    if not category:
        return ""
    return CATEGORY_NAMES.get(category, category)


def find_question(catalog: Sequence[Question], question_id: int) -> Question | None:
    return next((q for q in catalog if q.id == question_id), None)
