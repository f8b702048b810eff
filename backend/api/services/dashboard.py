# backend/api/services/dashboard.py
from __future__ import annotations

import math
import os
from typing import Any, Dict, List, Optional, Sequence

from models.report import IncidentReport

PAGE_SIZE = max(int(os.getenv("DASHBOARD_PAGE_SIZE", "12")), 1)


def date_key(report: IncidentReport) -> str:
    return report.date.isoformat()


def page_slice(reports: Sequence[IncidentReport], page: int, page_size: int = PAGE_SIZE) -> List[IncidentReport]:
    """Reports [(page-1)*size, page*size). Page numbers below 1 read as page 1."""
    page = max(page, 1)
    page_size = max(page_size, 1)
    start = (page - 1) * page_size
    return list(reports[start:start + page_size])


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    page_size = max(page_size, 1)
    return math.ceil(total / page_size) if total else 0


def group_by_date(reports: Sequence[IncidentReport]) -> Dict[str, List[IncidentReport]]:
    """
    Partition by ISO date. Groups come out in first-seen order, so input that is
    already newest-first yields newest-first groups.
    """
    groups: Dict[str, List[IncidentReport]] = {}
    for report in reports:
        groups.setdefault(date_key(report), []).append(report)
    return groups


def expand_date(reports: Sequence[IncidentReport], key: str) -> List[IncidentReport]:
    """
    Everything filed under `key`, taken from the full list rather than the
    visible page: a date whose reports straddle two pages expands to all of them.
    """
    return [r for r in reports if date_key(r) == key]


def find_report(reports: Sequence[IncidentReport], report_id: str) -> Optional[IncidentReport]:
    return next((r for r in reports if r.id == report_id), None)


def build_dashboard(reports: Sequence[IncidentReport], page: int = 1, page_size: int = PAGE_SIZE) -> Dict[str, Any]:
    page = max(page, 1)
    page_size = max(page_size, 1)
    visible = page_slice(reports, page, page_size)
    return {
        "page": page,
        "page_size": page_size,
        "total": len(reports),
        "pages": page_count(len(reports), page_size),
        "groups": [
            {"date": key, "count": len(items), "reports": items}
            for key, items in group_by_date(visible).items()
        ],
    }
