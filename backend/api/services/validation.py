# backend/api/services/validation.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, NamedTuple

from pydantic import ValidationError

from models.report import IncidentReportIn

REQUIRED_FIELDS = ("date", "caller_name", "caller_mobile", "sex", "precinct_name", "location")

# Messages used by the call-center form
REQUIRED_MESSAGES: dict[str, str] = {
    "date": "Date is required",
    "caller_name": "Caller name is required",
    "caller_mobile": "Invalid phone number",
    "sex": "Sex is required",
    "precinct_name": "Precinct name required",
    "location": "Location required",
}
INVALID_MESSAGES: dict[str, str] = {
    "date": "Invalid date",
    "time_of_incident": "Invalid time",
    "time_of_report": "Invalid time",
    "caller_mobile": "Invalid phone number",
    "sex": "Sex is required",
    "witness_choice": "Invalid witness choice",
    "incident_choice": "Invalid incident type",
}
WITNESS_ROLE_MESSAGE = "Caller role required if witness selected"


class FieldError(NamedTuple):
    field: str
    message: str


class ReportValidationError(Exception):
    """Raised with every field failure found in a submission."""

    def __init__(self, errors: List[FieldError]):
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors

    def by_field(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for err in self.errors:
            out.setdefault(err.field, []).append(err.message)
        return out


def clean_payload(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Trim every string. Optional fields left blank by the form count as absent;
    required ones keep the empty string so they fail as missing.
    """
    clean: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, str):
            value = value.strip()
            if not value and key not in REQUIRED_FIELDS:
                value = None
        clean[key] = value
    return clean


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_witness_role(data: Mapping[str, Any]) -> List[FieldError]:
    """Caller role becomes mandatory once a witness option is picked."""
    if not _is_blank(data.get("witness_choice")) and _is_blank(data.get("witness_role")):
        return [FieldError("witness_role", WITNESS_ROLE_MESSAGE)]
    return []


def _field_errors(exc: ValidationError, data: Mapping[str, Any]) -> List[FieldError]:
    errors: List[FieldError] = []
    seen: set[str] = set()
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "__root__"
        if field in seen:
            continue
        seen.add(field)
        if field in REQUIRED_MESSAGES and _is_blank(data.get(field)):
            message = REQUIRED_MESSAGES[field]
        else:
            message = INVALID_MESSAGES.get(field, err.get("msg", "Invalid value"))
        errors.append(FieldError(field, message))
    return errors


def validate_report(raw: Mapping[str, Any]) -> IncidentReportIn:
    """
    Validate a submitted record. Per-field checks run through the pydantic
    schema, then the cross-field witness rule runs as a separate pass over the
    same trimmed data. Raises ReportValidationError carrying all failures.
    """
    data = clean_payload(raw)
    errors: List[FieldError] = []
    report = None
    try:
        report = IncidentReportIn.model_validate(data)
    except ValidationError as e:
        errors.extend(_field_errors(e, data))

    errors.extend(check_witness_role(data))

    if errors:
        raise ReportValidationError(errors)
    return report
