"""
Shared test fixtures and configuration for pytest.
"""

from __future__ import annotations

import os
import sys

import pytest

# API modules import each other as top-level packages (db, models, ...)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["STORE_BACKEND"] = "memory"
os.environ.setdefault("AWS_REGION", "eu-north-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-north-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")


@pytest.fixture
def valid_payload():
    """The form payload for a plain, valid submission."""
    return {
        "date": "2024-01-01",
        "caller_name": "Jane Doe",
        "caller_mobile": "+231555123",
        "sex": "Female",
        "precinct_name": "P1",
        "location": "City Hall",
    }


@pytest.fixture
def store():
    """Provide a fresh in-memory report store."""
    from db.memory import InMemoryReportStore
    return InMemoryReportStore()


@pytest.fixture
def client(store):
    """TestClient wired to the in-memory store."""
    from fastapi.testclient import TestClient
    from db.store import get_store
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_report():
    """Build an IncidentReport with sensible defaults."""
    from models.report import IncidentReport

    counter = {"n": 0}

    def _make(day: str = "2024-01-01", **overrides):
        counter["n"] += 1
        data = {
            "id": f"r{counter['n']:03d}",
            "date": day,
            "caller_name": "Caller",
            "caller_mobile": "0770000000",
            "sex": "Male",
            "precinct_name": "Precinct",
            "location": "School",
        }
        data.update(overrides)
        return IncidentReport.model_validate(data)

    return _make
