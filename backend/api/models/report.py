# backend/api/models/report.py
import datetime as dt
from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field

PHONE_PATTERN = r"^\+?[0-9]{7,15}$"

Sex = Literal["Male", "Female", "Other"]
WitnessChoice = Literal["incident_witnessed", "arrived_after", "party_to_incident"]
IncidentChoice = Literal[
    "polling_not_open",
    "materials_not_arrived",
    "missing_on_roll",
    "no_security",
    "tension_unrest",
    "campaigning",
    "hate_speech",
    "overcrowding",
]
Status = Literal["pending", "resolved"]

INCIDENT_CHOICES: tuple[str, ...] = get_args(IncidentChoice)

# Labels shown next to the radio buttons on the call-center form
WITNESS_LABELS: dict[str, str] = {
    "incident_witnessed": "Incident witnessed by Caller",
    "arrived_after": "Caller arrived after incident",
    "party_to_incident": "Caller is party to incident",
}
INCIDENT_LABELS: dict[str, str] = {
    "polling_not_open": "Polling place is not open",
    "materials_not_arrived": "Polling materials have not arrived",
    "missing_on_roll": "People cannot be located on the FRR",
    "no_security": "No Security",
    "tension_unrest": "Tension / Unrest / Intimidation",
    "campaigning": "Campaigning at Center",
    "hate_speech": "Hate Speech / Violence",
    "overcrowding": "Overcrowding",
}


# What the call-center form posts (after trimming)
class IncidentReportIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(..., description="Calendar date of the incident")
    time_of_incident: Optional[dt.time] = None
    time_of_report: Optional[dt.time] = None
    caller_name: str = Field(..., min_length=1)
    caller_mobile: str = Field(..., pattern=PHONE_PATTERN)
    sex: Sex
    precinct_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    precinct_code: Optional[str] = None
    polling_place_number: Optional[str] = None
    witness_choice: Optional[WitnessChoice] = None
    witness_role: Optional[str] = Field(None, description="Required if witness_choice is set")
    incident_choice: Optional[IncidentChoice] = None
    incident_other: Optional[str] = Field(None, description="Free text when no category fits")
    resolution: Optional[str] = None


# What the store hands back
class IncidentReport(IncidentReportIn):
    id: str = Field(..., description="Store-assigned identifier")
    status: Status = "pending"


class ResolutionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    resolution: str = ""
    status: Literal["resolved"] = "resolved"


REPORT_FIELDS: tuple[str, ...] = ("id", *IncidentReportIn.model_fields, "status")
