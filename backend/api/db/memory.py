import copy
import uuid
from typing import Any, Dict, List, Optional

from db.store import ReportStore, StorageError, sort_newest_first


class InMemoryReportStore(ReportStore):
    """Process-local store for local development (STORE_BACKEND=memory) and tests."""

    def __init__(self):
        self._items: Dict[str, Dict[str, Any]] = {}

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        item = {k: v for k, v in record.items() if v is not None}
        item["id"] = str(uuid.uuid4())
        item["status"] = "pending"
        self._items[item["id"]] = item
        return copy.deepcopy(item)

    def select(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        filters = filters or {}
        items = [
            copy.deepcopy(it)
            for it in self._items.values()
            if all(it.get(k) == v for k, v in filters.items())
        ]
        return sort_newest_first(items)

    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        item = self._items.get(record_id)
        if item is None:
            raise StorageError(f"Report not found: {record_id}")
        item.update(fields)
