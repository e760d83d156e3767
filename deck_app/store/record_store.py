"""Interface shared by every record store backend."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

Record = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Order:
    """Sort instruction for ``RecordStore.query``."""

    column: str
    descending: bool = False


class RecordStore(Protocol):
    """Named collection of records reachable through four capabilities.

    Filters are equality matches on column values. Implementations raise
    ``StoreUnavailable`` or ``StoreRejected`` when a call fails, and
    ``NotFound`` from ``update_by_id`` when no row matched.
    """

    def query(self, filters: Mapping[str, Any], order: Order | None = None) -> list[Record]:
        ...

    def insert(self, record: Mapping[str, Any]) -> Record:
        ...

    def update_by_id(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        ...

    def delete_where(self, filters: Mapping[str, Any]) -> int:
        ...
