"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.assignments import AssignmentInterval  # noqa: E402


@pytest.fixture
def today():
    """Fixed 'today' for open-ended assignments."""
    return date(2024, 6, 30)


@pytest.fixture
def sample_csv():
    """Two employees overlapping 6 days on one project, with a header row."""
    return (
        "EmpID,ProjectID,DateFrom,DateTo\n"
        "1,100,2020-01-01,2020-01-10\n"
        "2,100,2020-01-05,2020-01-20\n"
    )


@pytest.fixture
def sample_records():
    """Assignment records for a pair working on two projects."""
    return [
        AssignmentInterval(1, 100, date(2020, 1, 1), date(2020, 1, 10)),
        AssignmentInterval(2, 100, date(2020, 1, 5), date(2020, 1, 20)),
        AssignmentInterval(3, 200, date(2019, 6, 1), date(2019, 6, 30)),
        AssignmentInterval(4, 200, date(2019, 6, 15), None),
    ]


@pytest.fixture(autouse=True)
def request_log_db(tmp_path, monkeypatch):
    """Point the API request log at a throwaway SQLite file."""
    import api.logging

    db_path = tmp_path / "requests.db"
    monkeypatch.setattr(api.logging, "DB_PATH", db_path)
    return db_path
