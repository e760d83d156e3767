"""Placeholder store used when no database credentials are configured."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NoReturn

from deck_app.core.errors import StoreUnavailable
from deck_app.store.record_store import Order, Record

NOT_CONFIGURED_MESSAGE = (
    "Record store not configured. Set DECKTALK_STORE_URL and DECKTALK_STORE_KEY."
)


class UnconfiguredRecordStore:
    """Rejects every call so the deck stays usable without a database."""

    def query(self, filters: Mapping[str, Any], order: Order | None = None) -> list[Record]:
        self._reject()

    def insert(self, record: Mapping[str, Any]) -> Record:
        self._reject()

    def update_by_id(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        self._reject()

    def delete_where(self, filters: Mapping[str, Any]) -> int:
        self._reject()

    @staticmethod
    def _reject() -> NoReturn:
        raise StoreUnavailable(NOT_CONFIGURED_MESSAGE)
