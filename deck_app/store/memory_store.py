"""In-process record store used for tests and offline runs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import copy
from threading import Lock
from typing import Any
from uuid import uuid4

from deck_app.core.errors import NotFound, StoreRejected
from deck_app.core.models import format_timestamp, utc_now
from deck_app.store.record_store import Order, Record


class MemoryRecordStore:
    """Keeps records in a list and mimics the hosted table's constraints."""

    def __init__(self, unique_together: Iterable[tuple[str, ...]] = ()) -> None:
        self._records: list[Record] = []
        self._unique_together = [tuple(columns) for columns in unique_together]
        self._lock = Lock()

    def query(self, filters: Mapping[str, Any], order: Order | None = None) -> list[Record]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._records if _matches(r, filters)]
        if order is not None:
            # Stable sort keeps insertion order for equal keys.
            rows.sort(key=lambda r: (r.get(order.column) is None, r.get(order.column) or ""))
            if order.descending:
                rows.reverse()
        return rows

    def insert(self, record: Mapping[str, Any]) -> Record:
        stored = dict(record)
        stored.setdefault("id", uuid4().hex)
        now = format_timestamp(utc_now())
        if not stored.get("created_at"):
            stored["created_at"] = now
        if not stored.get("updated_at"):
            stored["updated_at"] = stored["created_at"]
        with self._lock:
            if any(r["id"] == stored["id"] for r in self._records):
                raise StoreRejected(f"Duplicate id {stored['id']!r}", status_code=409)
            self._check_unique(stored)
            self._records.append(stored)
            return copy.deepcopy(stored)

    def update_by_id(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        with self._lock:
            for index, existing in enumerate(self._records):
                if existing["id"] == record_id:
                    updated = {**existing, **patch, "id": record_id}
                    self._check_unique(updated, ignore_id=record_id)
                    self._records[index] = updated
                    return copy.deepcopy(updated)
        raise NotFound(f"No record with id {record_id!r}")

    def delete_where(self, filters: Mapping[str, Any]) -> int:
        with self._lock:
            kept = [r for r in self._records if not _matches(r, filters)]
            removed = len(self._records) - len(kept)
            self._records = kept
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _check_unique(self, candidate: Record, ignore_id: str | None = None) -> None:
        for columns in self._unique_together:
            key = tuple(candidate.get(column) for column in columns)
            for existing in self._records:
                if existing["id"] == ignore_id:
                    continue
                if tuple(existing.get(column) for column in columns) == key:
                    raise StoreRejected(
                        f"Duplicate value for unique columns {', '.join(columns)}",
                        status_code=409,
                    )


def _matches(record: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(record.get(column) == value for column, value in filters.items())
