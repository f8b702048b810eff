# backend/api/routes/report.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse, Response

from db.store import ReportStore, StorageError, get_store
from models.report import INCIDENT_CHOICES, INCIDENT_LABELS, WITNESS_LABELS, ResolutionUpdate
from services import dashboard, renderer
from services.report_service import list_reports, submit_report, update_report
from services.validation import validate_report

log = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _incident_filter(incident_type: Optional[str]) -> Optional[str]:
    if incident_type and incident_type not in INCIDENT_CHOICES:
        raise HTTPException(status_code=400, detail=f"Unknown incident type: {incident_type}")
    return incident_type or None


@router.post("", status_code=201)
def create_report(payload: Dict[str, Any] = Body(...), store: ReportStore = Depends(get_store)):
    """
    Accept the call-center form payload, trim and validate it, then store it.
    Validation failures never reach the store.
    """
    report = validate_report(payload)
    stored = submit_report(store, report)
    return {"data": stored}


@router.get("")
def get_reports(
    incident_type: Optional[str] = Query(None, alias="type", description="Incident category, e.g. polling_not_open"),
    store: ReportStore = Depends(get_store),
):
    return {"data": list_reports(store, _incident_filter(incident_type))}


@router.get("/options")
def form_options():
    """Radio-button choices for the form, value -> label."""
    return {
        "sex": ["Male", "Female", "Other"],
        "witness_choice": WITNESS_LABELS,
        "incident_choice": INCIDENT_LABELS,
    }


@router.get("/dashboard")
def get_dashboard(
    page: int = Query(1, ge=1, description="1-based page number"),
    incident_type: Optional[str] = Query(None, alias="type"),
    store: ReportStore = Depends(get_store),
):
    reports = list_reports(store, _incident_filter(incident_type))
    return dashboard.build_dashboard(reports, page)


@router.get("/dashboard/{day}")
def expand_dashboard_date(
    day: dt.date,
    incident_type: Optional[str] = Query(None, alias="type"),
    store: ReportStore = Depends(get_store),
):
    """
    All reports for one date, regardless of which dashboard page they fall on.
    `type` narrows it the same way it narrows the dashboard.
    """
    key = day.isoformat()
    items = dashboard.expand_date(list_reports(store, _incident_filter(incident_type)), key)
    return {"date": key, "count": len(items), "reports": items}


@router.get("/print", response_class=HTMLResponse)
def print_reports(
    day: Optional[dt.date] = Query(None, alias="date", description="Only print this date's reports"),
    store: ReportStore = Depends(get_store),
):
    reports = list_reports(store)
    if day is not None:
        reports = dashboard.expand_date(reports, day.isoformat())
    return HTMLResponse(renderer.render_print_html(reports, title="NEC Incident Reports"))


@router.get("/export.csv")
def export_reports(
    incident_type: Optional[str] = Query(None, alias="type"),
    store: ReportStore = Depends(get_store),
):
    reports = list_reports(store, _incident_filter(incident_type))
    return Response(
        content=renderer.export_csv(reports),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="incident_reports.csv"'},
    )


def _lookup(store: ReportStore, report_id: str):
    report = dashboard.find_report(list_reports(store), report_id)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Report not found: {report_id}")
    return report


@router.get("/{report_id}")
def get_report(report_id: str, store: ReportStore = Depends(get_store)):
    return {"data": _lookup(store, report_id)}


@router.get("/{report_id}/print", response_class=HTMLResponse)
def print_report(report_id: str, store: ReportStore = Depends(get_store)):
    report = _lookup(store, report_id)
    return HTMLResponse(renderer.render_print_html([report], title="NEC Incident Report"))


@router.patch("/{report_id}")
def resolve_report(report_id: str, body: ResolutionUpdate, store: ReportStore = Depends(get_store)):
    """Save a resolution; the report flips to resolved."""
    if not body.resolution:
        return JSONResponse(status_code=400, content={"error": "Resolution cannot be empty."})
    try:
        update_report(store, report_id, body.resolution, body.status)
    except StorageError as e:
        log.warning("Update of %s rejected: %s", report_id, e.message)
        return JSONResponse(status_code=400, content={"error": e.message})
    return {"message": "Report updated successfully"}
