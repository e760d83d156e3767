"""FastAPI server that exposes the deck and answer endpoints."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field
import uvicorn

from deck_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from deck_app.constants.network_constants import (
    COOKIE_MAX_AGE_SECONDS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_ACTIVE_SESSIONS,
    SESSION_COOKIE,
    USER_NAME_COOKIE,
)
from deck_app.core.catalog import category_name, category_summary, find_question
from deck_app.core.errors import EmptyDeck, StoreError, StoreRejected, ValidationError
from deck_app.core.models import Answer, DeckState, PersonAnswers, Question
from deck_app.core.services.answer_views import answered_categories, filter_answers, filter_people
from deck_app.core.session_identity import ensure_session_id, normalize_user_name
from deck_app.server.session_registry import SessionRegistry, SessionState
from deck_app.store.record_store import RecordStore


class SaveAnswerPayload(BaseModel):
    """Payload schema for saving an answer."""

    answer_text: str
    question_id: int | None = None
    author_name: str | None = None


class UserNamePayload(BaseModel):
    """Payload schema for the display name used on new answers."""

    name: str = ""


class FilterPayload(BaseModel):
    """Payload schema for the category filter."""

    categories: list[str] = Field(default_factory=list)


class GoToPayload(BaseModel):
    index: int


def _set_cookie(response: Response, key: str, value: str) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=COOKIE_MAX_AGE_SECONDS,
        samesite="lax",
        httponly=True,
    )


def _ensure_session(request: Request, response: Response) -> str:
    session_id, created = ensure_session_id(request.cookies.get(SESSION_COOKIE))
    if created:
        _set_cookie(response, SESSION_COOKIE, session_id)
    return session_id


def _question_payload(question: Question | None) -> dict[str, object] | None:
    if question is None:
        return None
    return {
        "id": question.id,
        "text": question.text,
        "category": question.category,
        "category_name": category_name(question.category),
    }


def _answer_payload(answer: Answer | None) -> dict[str, object] | None:
    if answer is None:
        return None
    return {
        "id": answer.id,
        "question_id": answer.question_id,
        "question_text": answer.question_text,
        "answer_text": answer.answer_text,
        "category": answer.category,
        "author_name": answer.author_name,
        "created_at": answer.created_at.isoformat(),
        "updated_at": answer.updated_at.isoformat(),
    }


def _person_payload(person: PersonAnswers) -> dict[str, object]:
    last = person.last_answered_at
    return {
        "name": person.display_name,
        "total_answers": person.total,
        "last_answered": last.isoformat() if last else None,
        "answers": [_answer_payload(answer) for answer in person.answers],
    }


def _deck_payload(state: DeckState, session: SessionState) -> dict[str, object]:
    existing = None
    if state.question is not None:
        existing = session.answers.find_by_question(state.question.id)
    return {
        "question": _question_payload(state.question),
        "answer": _answer_payload(existing),
        "position": state.position,
        "total": state.total,
        "shuffled": state.shuffled,
        "active_categories": sorted(state.active_categories),
        "progress_percent": round(state.progress_percent, 2),
    }


def _store_http_error(exc: StoreError) -> HTTPException:
    if isinstance(exc, StoreRejected):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=503, detail=str(exc))


def _get_session_dependency(registry: SessionRegistry):
    def dependency(request: Request, response: Response) -> SessionState:
        return registry.get(_ensure_session(request, response))

    return dependency


def create_api_app(
    catalog: Sequence[Question],
    record_store: RecordStore,
    max_sessions: int = MAX_ACTIVE_SESSIONS,
) -> FastAPI:
    """Create a FastAPI application serving ``catalog`` and saving to ``record_store``."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=f"{APP_VERSION}.0",
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    registry = SessionRegistry(catalog, record_store, max_sessions=max_sessions)
    session_dep = _get_session_dependency(registry)
    app.state.registry = registry

    @app.get("/identity")
    def get_identity(request: Request, session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            error = session.answers.last_error
            loaded = session.answers.loaded
        return {
            "session_id": session.session_id,
            "user_name": normalize_user_name(request.cookies.get(USER_NAME_COOKIE)),
            "answers_loaded": loaded,
            "answers_error": str(error) if error else None,
        }

    @app.put("/identity/name")
    def set_user_name(payload: UserNamePayload, response: Response) -> dict[str, object]:
        name = normalize_user_name(payload.name)
        if name:
            _set_cookie(response, USER_NAME_COOKIE, name)
        else:
            response.delete_cookie(USER_NAME_COOKIE)
        return {"user_name": name}

    @app.get("/categories")
    def get_categories(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            selected = session.deck.active_categories
        return {
            "categories": [
                {
                    "id": category.id,
                    "name": category.name,
                    "count": category.count,
                    "selected": category.id in selected,
                }
                for category in category_summary(registry.catalog)
            ],
            "total_questions": len(registry.catalog),
        }

    @app.get("/deck")
    def get_deck(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/next")
    def next_question(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            try:
                session.deck.advance()
            except EmptyDeck as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/previous")
    def previous_question(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            try:
                session.deck.retreat()
            except EmptyDeck as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/shuffle")
    def shuffle_deck(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            session.deck.shuffle()
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/reset")
    def reset_deck(session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            session.deck.reset()
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/filter")
    def filter_deck(
        payload: FilterPayload,
        session: SessionState = Depends(session_dep),
    ) -> dict[str, object]:
        with session.lock:
            session.deck.apply_filter(payload.categories)
            return _deck_payload(session.deck.state(), session)

    @app.post("/deck/goto")
    def go_to_question(
        payload: GoToPayload,
        session: SessionState = Depends(session_dep),
    ) -> dict[str, object]:
        with session.lock:
            try:
                session.deck.go_to(payload.index)
            except IndexError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            return _deck_payload(session.deck.state(), session)

    @app.get("/answers")
    def list_answers(
        search: str = "",
        category: str | None = None,
        refresh: bool = False,
        session: SessionState = Depends(session_dep),
    ) -> dict[str, object]:
        with session.lock:
            if refresh or not session.answers.loaded:
                try:
                    session.answers.load_mine()
                except StoreError as exc:
                    raise _store_http_error(exc) from exc
            mine = session.answers.answers
        return {
            "answers": [_answer_payload(a) for a in filter_answers(mine, search, category)],
            "categories": answered_categories(mine),
            "total": len(mine),
        }

    @app.get("/answers/question/{question_id}")
    def get_answer_for_question(
        question_id: int,
        session: SessionState = Depends(session_dep),
    ) -> dict[str, object]:
        with session.lock:
            answer = session.answers.find_by_question(question_id)
        if answer is None:
            raise HTTPException(status_code=404, detail="No answer saved for this question.")
        return _answer_payload(answer)

    @app.post("/answers", status_code=201)
    def save_answer(
        payload: SaveAnswerPayload,
        request: Request,
        session: SessionState = Depends(session_dep),
    ) -> dict[str, object]:
        author = payload.author_name or request.cookies.get(USER_NAME_COOKIE)
        with session.lock:
            if payload.question_id is None:
                question = session.deck.current()
                if question is None:
                    raise HTTPException(status_code=409, detail="There is no current question to answer.")
            else:
                question = find_question(registry.catalog, payload.question_id)
                if question is None:
                    raise HTTPException(status_code=404, detail=f"Unknown question {payload.question_id}.")

            try:
                saved = session.answers.save(
                    question_id=question.id,
                    question_text=question.text,
                    answer_text=payload.answer_text,
                    category=question.category,
                    author_name=author,
                )
            except ValidationError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            except StoreError as exc:
                raise _store_http_error(exc) from exc
        return _answer_payload(saved)

    @app.delete("/answers/{answer_id}")
    def delete_answer(answer_id: str, session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            try:
                deleted = session.answers.delete(answer_id)
            except StoreError as exc:
                raise _store_http_error(exc) from exc
        return {"answer_id": answer_id, "deleted": deleted}

    @app.get("/community")
    def get_community(search: str = "", session: SessionState = Depends(session_dep)) -> dict[str, object]:
        with session.lock:
            try:
                people = session.answers.fetch_community()
            except StoreError as exc:
                raise _store_http_error(exc) from exc
        return {"people": [_person_payload(person) for person in filter_people(people, search)]}

    return app


def run_api_server(
    catalog: Sequence[Question],
    record_store: RecordStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(catalog, record_store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
