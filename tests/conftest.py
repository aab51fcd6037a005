"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.taxonomy import build_client_rules


@pytest.fixture
def taxonomy():
    """Client -> aliases mapping as found in clients.json."""
    return {"Acme": ["acme"], "Beta": ["beta"]}


@pytest.fixture
def rules(taxonomy):
    return build_client_rules(taxonomy)


@pytest.fixture
def clients_file(tmp_path, taxonomy):
    """clients.json written to a temp directory."""
    path = tmp_path / "clients.json"
    path.write_text(json.dumps(taxonomy), encoding="utf-8")
    return path


@pytest.fixture
def sample_event():
    """Sample normalized event for testing."""
    return {
        "id": "evt-1",
        "status": "confirmed",
        "summary": "Acme sync",
        "start": "2024-01-01T09:00:00Z",
        "end": "2024-01-01T10:00:00Z",
    }


@pytest.fixture
def sample_events(sample_event):
    """Two events in the week of Monday 2024-01-01: one Acme, one unmatched."""
    return [
        sample_event,
        {
            **sample_event,
            "id": "evt-2",
            "summary": "random chat",
            "start": "2024-01-01T10:00:00Z",
            "end": "2024-01-01T10:30:00Z",
        },
    ]


@pytest.fixture
def snapshot_payload(sample_events):
    return {
        "metadata": {
            "calendarId": "cal-1",
            "calendarName": "Work",
            "fetchedAt": "2024-01-08T00:00:00+00:00",
            "windowStart": "2023-10-10T00:00:00+00:00",
            "windowEnd": "2024-01-08T23:59:59+00:00",
            "eventCount": len(sample_events),
            "pagesFetched": 1,
        },
        "events": sample_events,
    }
