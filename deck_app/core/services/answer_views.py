"""Read-only projections over saved answers."""

from __future__ import annotations

from collections.abc import Iterable

from deck_app.constants.deck_constants import ANONYMOUS_AUTHOR
from deck_app.core.models import Answer, PersonAnswers


def group_by_author(answers: Iterable[Answer]) -> list[PersonAnswers]:
    """Partition answers by exact author name, keeping their incoming order.

    Callers pass answers newest first, so each group's first answer is its
    most recent one. Groups are returned by most recent activity.
    """
    groups: dict[str, PersonAnswers] = {}
    for answer in answers:
        name = answer.author_name or ANONYMOUS_AUTHOR
        group = groups.get(name)
        if group is None:
            group = PersonAnswers(display_name=name)
            groups[name] = group
        group.answers.append(answer)

    return sorted(
        groups.values(),
        key=lambda person: person.last_answered_at.timestamp(),
        reverse=True,
    )


def filter_answers(
    answers: Iterable[Answer],
    search: str = "",
    category: str | None = None,
) -> list[Answer]:
    needle = search.strip().lower()
    return [
        answer
        for answer in answers
        if _matches(answer, needle) and (not category or answer.category == category)
    ]


def answered_categories(answers: Iterable[Answer]) -> list[str]:
    seen: list[str] = []
    for answer in answers:
        if answer.category and answer.category not in seen:
            seen.append(answer.category)
    return seen


def filter_people(people: Iterable[PersonAnswers], search: str = "") -> list[PersonAnswers]:
    needle = search.strip().lower()
    if not needle:
        return list(people)
    return [
        person
        for person in people
        if needle in person.display_name.lower()
        or any(_matches(answer, needle) for answer in person.answers)
    ]


def _matches(answer: Answer, needle: str) -> bool:
    if not needle:
        return True
    return needle in answer.question_text.lower() or needle in answer.answer_text.lower()
