"""
Tests for the incident report validator.
"""

from __future__ import annotations

import datetime as dt

import pytest

from services.validation import (
    FieldError,
    ReportValidationError,
    check_witness_role,
    clean_payload,
    validate_report,
)


def _errors(payload) -> dict:
    with pytest.raises(ReportValidationError) as info:
        validate_report(payload)
    return info.value.by_field()


class TestRequiredFields:

    def test_valid_payload_passes(self, valid_payload):
        report = validate_report(valid_payload)
        assert report.date == dt.date(2024, 1, 1)
        assert report.caller_name == "Jane Doe"
        assert report.witness_choice is None

    @pytest.mark.parametrize(
        "field,message",
        [
            ("date", "Date is required"),
            ("caller_name", "Caller name is required"),
            ("caller_mobile", "Invalid phone number"),
            ("sex", "Sex is required"),
            ("precinct_name", "Precinct name required"),
            ("location", "Location required"),
        ],
    )
    def test_missing_required_field(self, valid_payload, field, message):
        del valid_payload[field]
        assert _errors(valid_payload)[field] == [message]

    def test_whitespace_only_counts_as_missing(self, valid_payload):
        valid_payload["caller_name"] = "   "
        assert _errors(valid_payload) == {"caller_name": ["Caller name is required"]}

    def test_all_errors_are_collected(self):
        errors = _errors({"witness_choice": "arrived_after"})
        assert set(errors) == {
            "date", "caller_name", "caller_mobile", "sex", "precinct_name", "location", "witness_role",
        }


class TestFormats:

    @pytest.mark.parametrize(
        "mobile",
        ["abc", "12345", "+1234567890123456", "077-123-4567", "\u0660\u0661\u0662\u0663\u0664\u0665\u0666\u0667", "\uff10\uff17\uff17\uff10\uff11\uff12\uff13\uff14"],
    )
    def test_invalid_phone(self, valid_payload, mobile):
        valid_payload["caller_mobile"] = mobile
        assert _errors(valid_payload) == {"caller_mobile": ["Invalid phone number"]}

    @pytest.mark.parametrize("mobile", ["1234567", "+231555123", " 0770123456 "])
    def test_valid_phone(self, valid_payload, mobile):
        valid_payload["caller_mobile"] = mobile
        assert validate_report(valid_payload).caller_mobile == mobile.strip()

    def test_unknown_sex(self, valid_payload):
        valid_payload["sex"] = "Unknown"
        assert _errors(valid_payload) == {"sex": ["Sex is required"]}

    def test_unknown_incident_choice(self, valid_payload):
        valid_payload["incident_choice"] = "alien_landing"
        assert _errors(valid_payload) == {"incident_choice": ["Invalid incident type"]}

    def test_unknown_witness_choice(self, valid_payload):
        valid_payload["witness_choice"] = "heard_rumour"
        valid_payload["witness_role"] = "Voter"
        assert _errors(valid_payload) == {"witness_choice": ["Invalid witness choice"]}

    def test_bad_date(self, valid_payload):
        valid_payload["date"] = "yesterday"
        assert _errors(valid_payload) == {"date": ["Invalid date"]}

    def test_times_are_parsed(self, valid_payload):
        valid_payload["time_of_incident"] = "09:15"
        report = validate_report(valid_payload)
        assert report.time_of_incident == dt.time(9, 15)
        assert report.time_of_report is None


class TestWitnessRole:

    def test_role_required_when_witness_selected(self, valid_payload):
        valid_payload["witness_choice"] = "incident_witnessed"
        assert _errors(valid_payload) == {"witness_role": ["Caller role required if witness selected"]}

    def test_whitespace_role_rejected(self, valid_payload):
        valid_payload["witness_choice"] = "party_to_incident"
        valid_payload["witness_role"] = "  \t"
        assert _errors(valid_payload) == {"witness_role": ["Caller role required if witness selected"]}

    def test_role_optional_without_witness(self, valid_payload):
        valid_payload["witness_role"] = ""
        report = validate_report(valid_payload)
        assert report.witness_role is None

    def test_role_given(self, valid_payload):
        valid_payload["witness_choice"] = "arrived_after"
        valid_payload["witness_role"] = " Poll worker "
        assert validate_report(valid_payload).witness_role == "Poll worker"

    def test_rule_in_isolation(self):
        assert check_witness_role({"witness_choice": "arrived_after"}) == [
            FieldError("witness_role", "Caller role required if witness selected")
        ]
        assert check_witness_role({"witness_choice": None, "witness_role": ""}) == []
        assert check_witness_role({"witness_choice": "arrived_after", "witness_role": "Voter"}) == []


class TestTrimming:

    def test_strings_trimmed(self, valid_payload):
        valid_payload["location"] = "  City Hall \n"
        valid_payload["precinct_code"] = " 0042 "
        report = validate_report(valid_payload)
        assert report.location == "City Hall"
        assert report.precinct_code == "0042"

    def test_blank_optionals_become_absent(self):
        clean = clean_payload({"incident_choice": "  ", "caller_name": " ", "precinct_code": 12})
        assert clean == {"incident_choice": None, "caller_name": "", "precinct_code": 12}

    def test_blank_enum_is_absent(self, valid_payload):
        valid_payload["incident_choice"] = ""
        valid_payload["witness_choice"] = ""
        report = validate_report(valid_payload)
        assert report.incident_choice is None
        assert report.witness_choice is None
