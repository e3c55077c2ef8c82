"""
Export dispatcher

Validates the chosen candidate, formats the current sessions and sends
them to the candidate's block of the shift sheet. One export at a time;
a second request while one is in flight is turned away.
"""

import threading
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

from ..utils.error_handler import NotificationCenter
from .candidates import CandidateRegistry
from .exceptions import SessionSyncError, ValidationError
from .logger import get_logger
from .session_store import SessionStore
from .sheet_export import build_sheet_values, build_export_range, DEFAULT_ROW_WINDOW
from .sheets import SheetUpdater

logger = get_logger(__name__)


class ExportState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass
class ExportResult:
    """Outcome of one export attempt"""
    success: bool
    message: str
    range_name: Optional[str] = None
    validation_failed: bool = False


class ExportDispatcher:
    """Formats session state and pushes it to the selected candidate's sheet"""

    def __init__(
        self,
        store: SessionStore,
        registry: CandidateRegistry,
        updater: SheetUpdater,
        notifications: Optional[NotificationCenter] = None,
        row_window: int = DEFAULT_ROW_WINDOW,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.registry = registry
        self.updater = updater
        self.notifications = notifications or registry.notifications
        self.row_window = row_window
        self.today = today
        self._in_flight = threading.Lock()
        self._state = ExportState.IDLE

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state == ExportState.SUBMITTING

    def _reject(self, message: str) -> ExportResult:
        self.notifications.warning("Please select candidate or ask admin to add your name",
                                   title="Select Candidate")
        logger.info(f"Export refused: {message}")
        return ExportResult(success=False, message=message, validation_failed=True)

    def export_to_sheet(self, candidate_name: str) -> ExportResult:
        """
        Export every session to the candidate's range

        Args:
            candidate_name: Sheet name of a known candidate

        Returns:
            ExportResult: success flag plus the message shown to the user
        """
        candidate = self.registry.find(candidate_name) if candidate_name else None
        if candidate is None:
            return self._reject(f"Unknown candidate: {candidate_name!r}")

        if not self._in_flight.acquire(blocking=False):
            logger.warning("Export already in progress, ignoring request",
                           extra={"candidate": candidate_name})
            return ExportResult(success=False, message="Export already in progress")

        self._state = ExportState.SUBMITTING
        try:
            try:
                range_name = build_export_range(candidate.sheet_name, candidate.sheet_range, self.row_window)
            except ValidationError as e:
                self.notifications.error(f"Candidate {candidate_name} has an invalid sheet range")
                logger.error(f"Export refused: {e}", extra={"candidate": candidate_name})
                return ExportResult(success=False, message=str(e), validation_failed=True)

            try:
                values = build_sheet_values(self.store.sessions, self.today())
                message = self.updater.update(range_name, values)
            except SessionSyncError as e:
                logger.error(f"Export failed: {e}", extra={"candidate": candidate_name, "range": range_name})
                self.notifications.error(f"Failed to update sheet: {e.message}")
                return ExportResult(success=False, message=e.message, range_name=range_name)

            logger.info(f"Exported {len(values)} rows to {range_name}",
                        extra={"candidate": candidate_name, "range": range_name})
            self.notifications.success(message)
            return ExportResult(success=True, message=message, range_name=range_name)
        finally:
            self._state = ExportState.IDLE
            self._in_flight.release()
