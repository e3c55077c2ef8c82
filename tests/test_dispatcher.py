"""
Tests for the export dispatcher: validation, transport outcomes and the
in-flight guard.
"""

import threading
import pytest
from datetime import date
from unittest.mock import Mock

from session_sync.core.candidates import CandidateRegistry
from session_sync.core.dispatcher import ExportDispatcher, ExportState
from session_sync.core.exceptions import ExternalServiceError
from session_sync.core.sheets import ApiSheetUpdater, SheetUpdater
from session_sync.utils.api_client import ApiResponse
from session_sync.utils.error_handler import ErrorSeverity, NotificationCenter


@pytest.fixture
def registry(mock_client):
    registry = CandidateRegistry(mock_client, NotificationCenter())
    registry.refresh()
    return registry


@pytest.fixture
def updater():
    updater = Mock(spec=SheetUpdater)
    updater.update.return_value = "Sheet updated successfully"
    return updater


@pytest.fixture
def dispatcher(store, registry, updater):
    return ExportDispatcher(store, registry, updater, today=lambda: date(2026, 10, 7))


class TestValidation:

    @pytest.mark.parametrize("name", ["", "Dave"])
    def test_unknown_or_empty_candidate_makes_no_call(self, dispatcher, updater, mock_client, name):
        result = dispatcher.export_to_sheet(name)

        assert not result.success
        assert result.validation_failed
        assert dispatcher.state == ExportState.IDLE
        updater.update.assert_not_called()
        mock_client.update_sheet.assert_not_called()

        latest = dispatcher.notifications.latest
        assert latest.severity == ErrorSeverity.WARNING
        assert latest.title == "Select Candidate"

    def test_invalid_sheet_range(self, dispatcher, updater):
        result = dispatcher.export_to_sheet("Carol")

        assert not result.success
        assert result.validation_failed
        updater.update.assert_not_called()
        assert dispatcher.state == ExportState.IDLE


class TestExport:

    def test_success(self, dispatcher, updater, store):
        store.update_session_field(0, "session_id", "S1")

        result = dispatcher.export_to_sheet("Alice")

        assert result.success
        assert result.range_name == "Alice!314:387"
        range_name, values = updater.update.call_args.args
        assert range_name == "Alice!314:387"
        assert values[0] == ["07 Oct 2026"]
        assert values[1] == ["SHIFT A"]
        assert values[2][0] == "S1"
        assert len(values) == 74
        assert dispatcher.state == ExportState.IDLE
        assert dispatcher.notifications.latest.severity == ErrorSeverity.SUCCESS

    def test_cell_anchor(self, dispatcher, updater):
        assert dispatcher.export_to_sheet("Bob").range_name == "Bob!A10:H83"

    def test_transport_failure_is_reported_not_raised(self, dispatcher, updater):
        updater.update.side_effect = ExternalServiceError("Internal Server Error", service="sheet export", status_code=500)

        result = dispatcher.export_to_sheet("Alice")

        assert not result.success
        assert not result.validation_failed
        assert result.message == "Internal Server Error"
        assert dispatcher.state == ExportState.IDLE
        latest = dispatcher.notifications.latest
        assert latest.severity == ErrorSeverity.ERROR
        assert "Internal Server Error" in latest.message

    def test_failure_is_not_retried(self, dispatcher, updater):
        updater.update.side_effect = ExternalServiceError("boom")
        dispatcher.export_to_sheet("Alice")
        assert updater.update.call_count == 1

    def test_malformed_stored_time_fails_export(self, dispatcher, updater, store):
        store.update_video_field(0, 0, "start_time", "whenever")
        result = dispatcher.export_to_sheet("Alice")
        assert not result.success
        updater.update.assert_not_called()

    def test_through_api_updater(self, store, registry, mock_client):
        dispatcher = ExportDispatcher(store, registry, ApiSheetUpdater(mock_client),
                                      today=lambda: date(2026, 10, 7))
        mock_client.update_sheet.return_value = ApiResponse(success=False, error="Invalid request data", status_code=400)

        result = dispatcher.export_to_sheet("Alice")

        assert not result.success
        assert result.message == "Invalid request data"
        mock_client.update_sheet.assert_called_once()


class TestInFlightGuard:

    def test_reentrant_export_is_rejected(self, store, registry):
        started = threading.Event()
        release = threading.Event()

        class SlowUpdater(SheetUpdater):
            calls = 0

            def update(self, range_name, values):
                SlowUpdater.calls += 1
                started.set()
                release.wait(timeout=5)
                return "ok"

        dispatcher = ExportDispatcher(store, registry, SlowUpdater(), today=lambda: date(2026, 10, 7))
        results = []
        worker = threading.Thread(target=lambda: results.append(dispatcher.export_to_sheet("Alice")))
        worker.start()
        assert started.wait(timeout=5)

        assert dispatcher.loading
        second = dispatcher.export_to_sheet("Alice")

        release.set()
        worker.join(timeout=5)

        assert not second.success
        assert "in progress" in second.message
        assert results[0].success
        assert SlowUpdater.calls == 1
        assert dispatcher.state == ExportState.IDLE

    def test_sequential_exports_both_run(self, dispatcher, updater):
        assert dispatcher.export_to_sheet("Alice").success
        assert dispatcher.export_to_sheet("Alice").success
        assert updater.update.call_count == 2
