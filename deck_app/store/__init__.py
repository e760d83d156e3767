"""Record store backends for saved answers."""

from __future__ import annotations

import logging

from deck_app.config import BACKEND_MEMORY, BACKEND_REST, Settings
from deck_app.constants.store_constants import ANSWER_UNIQUE_COLUMNS

from .memory_store import MemoryRecordStore
from .record_store import Order, Record, RecordStore
from .rest_store import RestRecordStore
from .unconfigured_store import UnconfiguredRecordStore

logger = logging.getLogger(__name__)


def create_record_store(settings: Settings) -> RecordStore:
    """Pick the backend described by ``settings``."""
    backend = settings.resolved_backend()
    if backend == BACKEND_REST:
        logger.info("Using hosted record store table %r", settings.store_table)
        return RestRecordStore(
            base_url=settings.store_url or "",
            api_key=settings.store_key or "",
            table=settings.store_table,
            timeout=settings.store_timeout,
        )
    if backend == BACKEND_MEMORY:
        logger.info("Using in-memory record store; answers are lost on exit")
        return MemoryRecordStore(unique_together=[ANSWER_UNIQUE_COLUMNS])
    logger.error("Record store configuration required; answers cannot be saved")
    return UnconfiguredRecordStore()


__all__ = [
    "MemoryRecordStore",
    "Order",
    "Record",
    "RecordStore",
    "RestRecordStore",
    "UnconfiguredRecordStore",
    "create_record_store",
]
