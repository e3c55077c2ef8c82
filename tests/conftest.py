"""
Pytest configuration and shared fixtures for Session Sync tests
"""
import logging
import os
import sys
import pytest
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import Mock

# Add src to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from session_sync.core.persistence import LocalStoragePersistence
from session_sync.core.session_store import SessionStore
from session_sync.core.storage import MemoryStorage
from session_sync.utils.api_client import ApiResponse, SheetSyncApiClient


def pytest_configure(config):
    """Keep tests away from any developer .env or live endpoints"""
    for key in list(os.environ):
        if key.startswith("SESSIONSYNC_"):
            del os.environ[key]


class FakeClock:
    """Returns a fixed start time, advancing one second per call"""

    def __init__(self, start: datetime = datetime(2026, 10, 7, 13, 45, 30)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


# ========================================
# Store Fixtures
# ========================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def persistence(storage):
    return LocalStoragePersistence(storage)


@pytest.fixture
def make_store(persistence, clock):
    """Build a store over the shared in-memory storage"""
    def _make(session_count=12, videos_per_session=6):
        return SessionStore(
            persistence,
            session_count=session_count,
            videos_per_session=videos_per_session,
            clock=clock,
        )
    return _make


@pytest.fixture
def store(make_store):
    return make_store()


# ========================================
# Mock Fixtures for External Services
# ========================================

@pytest.fixture
def candidate_payload():
    """Registry list response as the web app returns it"""
    return [
        {"_id": "65a1", "sheetName": "Alice", "sheetRange": "314"},
        {"_id": "65a2", "sheetName": "Bob", "sheetRange": "A10"},
        {"_id": "65a3", "sheetName": "Carol", "sheetRange": "row-one"},
    ]


@pytest.fixture
def mock_client(candidate_payload):
    """API client double with a healthy registry and export endpoint"""
    client = Mock(spec=SheetSyncApiClient)
    client.list_candidates.return_value = ApiResponse(success=True, data=candidate_payload, status_code=200)
    client.create_candidate.return_value = ApiResponse(success=True, data={"message": "Sheet created successfully"}, status_code=200)
    client.update_candidate.return_value = ApiResponse(success=True, data={"message": "Sheet updated successfully"}, status_code=200)
    client.delete_candidate.return_value = ApiResponse(success=True, data={"message": "Sheet deleted successfully"}, status_code=200)
    client.update_sheet.return_value = ApiResponse(success=True, data={"message": "Sheet updated successfully"}, status_code=200)
    return client


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; undo it after each test"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
