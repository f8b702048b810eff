# backend/api/services/report_service.py
from __future__ import annotations

import logging
from typing import List, Literal, Optional

from db.store import ReportStore
from models.report import IncidentReport, IncidentReportIn

log = logging.getLogger(__name__)


def submit_report(store: ReportStore, report: IncidentReportIn) -> IncidentReport:
    """
    Forward a validated report to the store. StorageError propagates untouched;
    nothing is retried.
    """
    record = report.model_dump(mode="json", exclude_none=True)
    stored = store.insert(record)
    log.info("Stored report %s for %s", stored.get("id"), record.get("date"))
    return IncidentReport.model_validate(stored)


def list_reports(store: ReportStore, incident_choice: Optional[str] = None) -> List[IncidentReport]:
    """All reports, newest date first; optionally only one incident category."""
    filters = {"incident_choice": incident_choice} if incident_choice else None
    return [IncidentReport.model_validate(it) for it in store.select(filters)]


def update_report(
    store: ReportStore, report_id: str, resolution: str, status: Literal["resolved"] = "resolved"
) -> None:
    """
    Save a resolution and mark the report resolved.

    An empty resolution is accepted here as a plain partial update; callers
    should refuse it before getting this far.
    """
    if status != "resolved":
        raise ValueError(f"Reports can only be set to resolved, not {status!r}")
    store.update(report_id, {"resolution": resolution, "status": status})
    log.info("Report %s set to %s", report_id, status)
