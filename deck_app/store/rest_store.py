"""Record store backed by a hosted PostgREST (Supabase) table."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

import requests

from deck_app.constants.store_constants import DEFAULT_STORE_TIMEOUT_SECONDS, REST_PATH_PREFIX
from deck_app.core.errors import NotFound, StoreRejected, StoreUnavailable
from deck_app.store.record_store import Order, Record

logger = logging.getLogger(__name__)


class RestRecordStore:
    """Talks to ``{base_url}/rest/v1/{table}`` with the anonymous API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str,
        timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}{REST_PATH_PREFIX}/{table}"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def query(self, filters: Mapping[str, Any], order: Order | None = None) -> list[Record]:
        params = {"select": "*", **_filter_params(filters)}
        if order is not None:
            direction = "desc" if order.descending else "asc"
            params["order"] = f"{order.column}.{direction}"
        return self._request("GET", params=params)

    def insert(self, record: Mapping[str, Any]) -> Record:
        rows = self._request("POST", json=dict(record), representation=True)
        if not rows:
            raise StoreRejected("Insert returned no rows.")
        return rows[0]

    def update_by_id(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        rows = self._request(
            "PATCH",
            params=_filter_params({"id": record_id}),
            json=dict(patch),
            representation=True,
        )
        if not rows:
            raise NotFound(f"No record with id {record_id!r}")
        return rows[0]

    def delete_where(self, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise ValueError("Refusing to delete without a filter.")
        rows = self._request("DELETE", params=_filter_params(filters), representation=True)
        return len(rows)

    def _request(
        self,
        method: str,
        params: Mapping[str, str] | None = None,
        json: Mapping[str, Any] | None = None,
        representation: bool = False,
    ) -> list[Record]:
        headers = {"Prefer": "return=representation"} if representation else None
        try:
            response = self._session.request(
                method,
                self._endpoint,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("Record store unreachable (%s %s): %s", method, self._endpoint, exc)
            raise StoreUnavailable(f"Record store unreachable: {exc}") from exc
        except requests.RequestException as exc:
            raise StoreRejected(f"Record store request failed: {exc}") from exc

        if response.status_code >= 500:
            logger.warning("Record store returned %s for %s", response.status_code, method)
            raise StoreUnavailable(
                f"Record store error {response.status_code}: {_error_message(response)}"
            )
        if response.status_code >= 400:
            raise StoreRejected(_error_message(response), status_code=response.status_code)

        if not response.content:
            return []
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreRejected("Record store returned invalid JSON.") from exc
        if isinstance(payload, dict):
            return [payload]
        return list(payload)


def _filter_params(filters: Mapping[str, Any]) -> dict[str, str]:
    return {column: _eq(value) for column, value in filters.items()}


def _eq(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason or "Unknown error"
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("error") or payload)
    return str(payload)
