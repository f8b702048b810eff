# backend/api/services/renderer.py
from __future__ import annotations

import csv
import datetime as dt
import html
import io
from typing import Any, List, NamedTuple, Sequence, Tuple

from models.report import REPORT_FIELDS, IncidentReport

PLACEHOLDER = "-"
TEXT_SEPARATOR = "=" * 60

# Section order and membership are fixed
SECTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("General Information", ("date", "time_of_incident", "time_of_report", "caller_name", "caller_mobile", "sex")),
    ("Location", ("precinct_name", "precinct_code", "polling_place_number", "location")),
    ("Witness", ("witness_choice", "witness_role")),
    ("Incident Details", ("incident_choice", "incident_other", "resolution")),
)

PRINT_STYLES = """
    @page { size: A4; margin: 15mm; }
    body { font-family: Arial, sans-serif; font-size: 12px; color: #111; line-height: 1.5; }
    h1 { text-align: center; font-size: 22px; margin-bottom: 10px; }
    h2 { font-size: 16px; margin-top: 12px; border-bottom: 1px solid #ddd; padding-bottom: 3px; }
    .section { margin-bottom: 12px; page-break-inside: avoid; }
    .field { margin-bottom: 6px; }
    .label { font-weight: bold; display: inline-block; width: 160px; }
    .report { page-break-after: always; }
"""


class Section(NamedTuple):
    title: str
    fields: List[Tuple[str, str]]


def humanize_label(field: str) -> str:
    """time_of_incident -> Time Of Incident"""
    return " ".join(word.capitalize() for word in field.split("_"))


def format_value(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    if isinstance(value, dt.time):
        return value.strftime("%H:%M")
    if isinstance(value, dt.date):
        return value.isoformat()
    return str(value)


def render_report(report: IncidentReport) -> List[Section]:
    return [
        Section(title, [(humanize_label(f), format_value(getattr(report, f))) for f in fields])
        for title, fields in SECTIONS
    ]


def render_reports(reports: Sequence[IncidentReport]) -> List[List[Section]]:
    return [render_report(r) for r in reports]


def render_text(reports: Sequence[IncidentReport]) -> str:
    blocks = []
    for sections in render_reports(reports):
        lines = []
        for section in sections:
            lines.append(section.title)
            lines.extend(f"  {label}: {value}" for label, value in section.fields)
        blocks.append("\n".join(lines))
    return f"\n{TEXT_SEPARATOR}\n".join(blocks)


def _sections_html(sections: List[Section]) -> str:
    parts = []
    for section in sections:
        parts.append(f'<div class="section"><h2>{html.escape(section.title)}</h2>')
        for label, value in section.fields:
            parts.append(
                f'<div class="field"><span class="label">{html.escape(label)}:</span> {html.escape(value)}</div>'
            )
        parts.append("</div>")
    return "".join(parts)


def render_print_html(reports: Sequence[IncidentReport], title: str = "NEC Incident Reports") -> str:
    """A4 print document; each report sits in its own block with a page break after it."""
    body = "".join(f'<div class="report">{_sections_html(s)}</div>' for s in render_reports(reports))
    return (
        f"<html><head><title>{html.escape(title)}</title><style>{PRINT_STYLES}</style></head>"
        f"<body><h1>{html.escape(title)}</h1>{body}</body></html>"
    )


def export_csv(reports: Sequence[IncidentReport]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(REPORT_FIELDS)
    for report in reports:
        row = report.model_dump(mode="json")
        writer.writerow(["" if row.get(f) is None else row[f] for f in REPORT_FIELDS])
    return buf.getvalue()
