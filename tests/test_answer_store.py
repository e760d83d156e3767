import pytest

from deck_app.core.errors import StoreRejected, StoreUnavailable, ValidationError
from deck_app.core.services.answer_store import AnswerStore
from deck_app.store.unconfigured_store import UnconfiguredRecordStore


class FlakyStore:
    """Delegates to a real store until told to fail."""

    def __init__(self, inner):
        self.inner = inner
        self.error = None
        self.calls = 0

    def _maybe_fail(self):
        self.calls += 1
        if self.error is not None:
            raise self.error

    def query(self, filters, order=None):
        self._maybe_fail()
        return self.inner.query(filters, order)

    def insert(self, record):
        self._maybe_fail()
        return self.inner.insert(record)

    def update_by_id(self, record_id, patch):
        self._maybe_fail()
        return self.inner.update_by_id(record_id, patch)

    def delete_where(self, filters):
        self._maybe_fail()
        return self.inner.delete_where(filters)


def _save(store, question_id=3, text="A garden with my friends", author="Alice"):
    return store.save(
        question_id=question_id,
        question_text=f"Question {question_id}",
        answer_text=text,
        category="dreams",
        author_name=author,
    )


def test_save_then_find_by_question_returns_saved_text(answer_store):
    saved = _save(answer_store, text="A quiet cabin")
    found = answer_store.find_by_question(3)
    assert found is not None
    assert found.answer_text == "A quiet cabin"
    assert found.id == saved.id
    assert found.session_id == "session_mine"
    assert found.created_at == found.updated_at


def test_second_save_updates_instead_of_duplicating(answer_store, record_store):
    first = _save(answer_store, text="First thought")
    second = _save(answer_store, text="Second thought", author="Alicia")

    assert second.id == first.id
    assert second.answer_text == "Second thought"
    assert second.author_name == "Alicia"
    assert second.updated_at > first.updated_at
    assert second.created_at == first.created_at
    assert len(record_store) == 1

    mine = answer_store.load_mine()
    assert [a.question_id for a in mine] == [3]
    assert mine[0].answer_text == "Second thought"


def test_save_trims_text_and_blank_author(answer_store):
    saved = _save(answer_store, text="  padded  ", author="   ")
    assert saved.answer_text == "padded"
    assert saved.author_name is None


def test_whitespace_only_answer_is_rejected_without_store_call(record_store, clock):
    flaky = FlakyStore(record_store)
    store = AnswerStore(flaky, "session_mine", clock=clock)
    with pytest.raises(ValidationError):
        _save(store, text="   ")
    assert flaky.calls == 0
    assert store.answers == []
    assert len(record_store) == 0


def test_save_updates_answer_missing_from_cache(answer_store, record_store, clock):
    _save(answer_store, text="Saved in another tab")
    fresh = AnswerStore(record_store, "session_mine", clock=clock)
    saved = _save(fresh, text="Edited here")
    assert len(record_store) == 1
    assert fresh.answers == [saved]


def test_save_after_row_deleted_elsewhere_keeps_one_cached_answer(answer_store, record_store, clock):
    _save(answer_store, text="first")
    other_tab = AnswerStore(record_store, "session_mine", clock=clock)
    other_tab.load_mine()
    assert other_tab.delete(other_tab.answers[0].id) is True

    saved = _save(answer_store, text="second")

    assert [a.question_id for a in answer_store.answers] == [3]
    assert answer_store.answers == [saved]
    assert len(record_store) == 1


class VanishingStore(FlakyStore):
    """Deletes the target row just before an update reaches it."""

    def update_by_id(self, record_id, patch):
        self.inner.delete_where({"id": record_id})
        return super().update_by_id(record_id, patch)


def test_save_inserts_when_row_vanishes_before_update(answer_store, record_store, clock):
    _save(answer_store, question_id=1)
    first = _save(answer_store, question_id=3, text="before")
    store = AnswerStore(VanishingStore(record_store), "session_mine", clock=clock)
    store.load_mine()

    saved = store.save(3, "Question 3", "after", category="dreams")

    assert saved.id != first.id
    assert [a.question_id for a in store.answers] == [3, 1]
    assert store.find_by_question(3).answer_text == "after"
    assert len(record_store) == 2


def test_new_answers_are_prepended_to_cache(answer_store):
    _save(answer_store, question_id=1)
    _save(answer_store, question_id=2)
    assert [a.question_id for a in answer_store.answers] == [2, 1]


def test_load_mine_returns_only_own_answers_newest_first(answer_store, other_store):
    _save(answer_store, question_id=1)
    _save(other_store, question_id=1)
    _save(answer_store, question_id=2)

    mine = answer_store.load_mine()
    assert [a.question_id for a in mine] == [2, 1]
    assert all(a.session_id == "session_mine" for a in mine)
    assert answer_store.loaded is True


def test_delete_removes_answer_from_store_and_cache(answer_store, record_store):
    saved = _save(answer_store)
    assert answer_store.delete(saved.id) is True
    assert answer_store.find_by_question(3) is None
    assert len(record_store) == 0


def test_delete_of_other_sessions_answer_is_benign_no_op(answer_store, other_store, record_store):
    theirs = _save(other_store, text="Not yours")
    assert answer_store.delete(theirs.id) is False
    assert len(record_store) == 1
    assert other_store.load_mine()[0].answer_text == "Not yours"
    assert answer_store.last_error is None


def test_delete_of_unknown_id_returns_false(answer_store):
    assert answer_store.delete("does-not-exist") is False


def test_find_by_question_never_touches_store(record_store, clock):
    flaky = FlakyStore(record_store)
    store = AnswerStore(flaky, "session_mine", clock=clock)
    assert store.find_by_question(42) is None
    assert flaky.calls == 0


def test_fetch_community_groups_by_author(answer_store, other_store, record_store, clock):
    third = AnswerStore(record_store, "session_third", clock=clock)
    _save(answer_store, question_id=1, text="one", author="Alice")
    _save(other_store, question_id=1, text="bob", author="Bob")
    _save(answer_store, question_id=2, text="two", author="Alice")
    _save(third, question_id=4, text="no name", author=None)

    people = answer_store.fetch_community()
    by_name = {person.display_name: person for person in people}

    assert set(by_name) == {"Alice", "Bob", "Anonymous"}
    alice = by_name["Alice"]
    assert alice.total == 2
    assert [a.answer_text for a in alice.answers] == ["two", "one"]
    assert alice.last_answered_at == alice.answers[0].created_at
    assert [p.display_name for p in people] == ["Anonymous", "Alice", "Bob"]


def test_fetch_community_keeps_distinct_names_apart(answer_store, other_store):
    _save(answer_store, question_id=1, author="alice")
    _save(other_store, question_id=1, author="Alice")
    names = sorted(p.display_name for p in answer_store.fetch_community())
    assert names == ["Alice", "alice"]


def test_fetch_community_does_not_touch_cache(answer_store, other_store):
    _save(other_store, question_id=1)
    answer_store.fetch_community()
    assert answer_store.answers == []


@pytest.mark.parametrize("error", [StoreUnavailable("down"), StoreRejected("nope", status_code=400)])
def test_failures_leave_cache_untouched(answer_store, record_store, clock, error):
    saved = _save(answer_store, text="kept")
    flaky = FlakyStore(record_store)
    store = AnswerStore(flaky, "session_mine", clock=clock)
    store.load_mine()
    before = store.answers

    flaky.error = error
    with pytest.raises(type(error)):
        store.load_mine()
    with pytest.raises(type(error)):
        _save(store, text="changed")
    with pytest.raises(type(error)):
        store.delete(saved.id)
    with pytest.raises(type(error)):
        store.fetch_community()

    assert store.answers == before
    assert store.last_error is error

    flaky.error = None
    store.load_mine()
    assert store.last_error is None
    assert store.find_by_question(3).answer_text == "kept"


def test_unconfigured_store_reports_unavailable():
    store = AnswerStore(UnconfiguredRecordStore(), "session_mine")
    with pytest.raises(StoreUnavailable):
        store.load_mine()
    assert store.loaded is False
    assert isinstance(store.last_error, StoreUnavailable)


def test_session_id_is_required(record_store):
    with pytest.raises(ValueError):
        AnswerStore(record_store, "")
