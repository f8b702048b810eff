from __future__ import annotations

import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict, List, Optional

STORE_BACKEND = os.getenv("STORE_BACKEND", "dynamo").strip().lower()


class StorageError(Exception):
    """Any failure reported by the store; `message` is passed to the caller as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReportStore(ABC):
    """
    The three operations the service needs from the hosted database.
    Records are plain dicts with JSON-friendly values (ISO dates/times).
    """

    @abstractmethod
    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new record, assigning `id` and `status`; return the stored item."""

    @abstractmethod
    def select(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return records whose attributes equal every value in `filters`, newest date first."""

    @abstractmethod
    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial update to one existing record."""


def sort_newest_first(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # id first so equal dates keep a stable order between calls
    ordered = sorted(items, key=lambda it: str(it.get("id", "")))
    return sorted(ordered, key=lambda it: str(it.get("date", "")), reverse=True)


@lru_cache(maxsize=1)
def get_store() -> ReportStore:
    """FastAPI dependency: the configured store, built once per process."""
    if STORE_BACKEND == "memory":
        from db.memory import InMemoryReportStore
        return InMemoryReportStore()
    if STORE_BACKEND == "dynamo":
        from db.dynamo import DynamoReportStore
        return DynamoReportStore()
    raise RuntimeError(f"Unknown STORE_BACKEND {STORE_BACKEND!r}; use 'dynamo' or 'memory'.")
