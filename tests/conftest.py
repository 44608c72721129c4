"""Shared fixtures for the job tracker tests."""

from datetime import date

import pytest

from job_tracker import config as config_module
from job_tracker.config import Config
from job_tracker.models import JobApplicationRecord, Position, Status
from job_tracker.storage import MemoryStore


def make_record(**overrides) -> JobApplicationRecord:
    """Build a valid record, overriding any attribute by its snake_case name."""
    values = {
        "contact_name": "Jane Doe",
        "organization_name": "Acme",
        "applied_date": date(2024, 1, 10),
    }
    values.update(overrides)
    return JobApplicationRecord(**values)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def scenario_records():
    """Two records from the acceptance scenario: Acme applied, Beta rejected."""
    return [
        make_record(
            id="1",
            organization_name="Acme",
            status=Status.APPLIED,
            applied_date=date(2024, 1, 10),
        ),
        make_record(
            id="2",
            organization_name="Beta",
            status=Status.REJECTED,
            applied_date=date(2024, 2, 1),
        ),
    ]


@pytest.fixture
def mixed_records():
    """A small collection with varied text fields for search tests."""
    return [
        make_record(
            id="a",
            contact_name="Alice Martin",
            organization_name="Northwind",
            end_client="Contoso Bank",
            location="Toronto",
            email="alice@northwind.example, hr@northwind.example",
            phone="416-555-0100",
            position=Position.DATA_ENGINEER,
            applied_date=date(2024, 3, 5),
        ),
        make_record(
            id="b",
            contact_name="Bob Singh",
            organization_name="Fabrikam",
            location="Montreal",
            email="bob@fabrikam.example",
            phone="514-555-0199",
            position=Position.ML_ENGINEER,
            status=Status.SECOND_ROUND,
            applied_date=date(2024, 3, 1),
        ),
        make_record(
            id="c",
            contact_name="Carla Gomez",
            organization_name="Tailspin",
            location="Vancouver",
            position=Position.PYTHON_DEVELOPER,
            status=Status.REJECTED,
            applied_date=date(2024, 3, 5),
        ),
    ]


@pytest.fixture
def app_config(tmp_path, monkeypatch):
    """Install a config pointing every path into ``tmp_path``."""
    config = Config(
        data_path=tmp_path / "data" / "job_tracker.sqlite",
        log_dir=tmp_path / "logs",
        export_dir=tmp_path / "exports",
        lock_file=tmp_path / "job_tracker.lock",
    )
    monkeypatch.setattr(config_module, "_config", config)
    return config
