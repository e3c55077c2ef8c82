"""
Candidate registry cache

Holds the latest full list of export candidates fetched from the registry.
Every create, update or delete re-fetches the whole list afterwards;
nothing is patched locally.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..utils.api_client import SheetSyncApiClient, ApiResponse
from ..utils.error_handler import ErrorHandler, ErrorSeverity, NotificationCenter
from .logger import get_logger
from .models import CandidateMapping
from .persistence import LocalStoragePersistence

logger = get_logger(__name__)


class CandidateRegistry:
    """Cached view of the remote sheet-name to sheet-range registry"""

    def __init__(
        self,
        client: SheetSyncApiClient,
        notifications: Optional[NotificationCenter] = None,
        persistence: Optional[LocalStoragePersistence] = None,
    ):
        self.client = client
        self.notifications = notifications or NotificationCenter()
        self.persistence = persistence
        self._candidates: List[CandidateMapping] = []

    @property
    def candidates(self) -> List[CandidateMapping]:
        return list(self._candidates)

    @property
    def names(self) -> List[str]:
        return [candidate.sheet_name for candidate in self._candidates]

    def find(self, sheet_name: str) -> Optional[CandidateMapping]:
        for candidate in self._candidates:
            if candidate.sheet_name == sheet_name:
                return candidate
        return None

    def _report_failure(self, action: str, response: ApiResponse) -> None:
        error_info = ErrorHandler.get_api_error_info(
            response.error or "Unknown error", response.status_code, service="candidate registry"
        )
        logger.error(f"Failed to {action}: {error_info.details}", extra={"status_code": response.status_code})
        self.notifications.report(error_info, prefix=f"Failed to {action}", severity=ErrorSeverity.ERROR)

    def refresh(self) -> bool:
        """Re-fetch the full candidate list; the previous cache survives a failure."""
        response = self.client.list_candidates()
        if not response.success:
            self._report_failure("load sheets data", response)
            return False

        candidates = []
        for item in response.data:
            try:
                candidates.append(CandidateMapping.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed candidate entry {item!r}: {e.error_count()} error(s)")
        self._candidates = candidates
        logger.debug(f"Loaded {len(candidates)} candidates")
        return True

    def create(self, sheet_name: str, sheet_range: str) -> bool:
        response = self.client.create_candidate(sheet_name, sheet_range)
        if not response.success:
            self._report_failure("save sheet data", response)
            return False
        self.refresh()
        self.notifications.success("Sheets data saved successfully")
        return True

    def update(self, candidate_id: str, sheet_name: str, sheet_range: str) -> bool:
        response = self.client.update_candidate(candidate_id, sheet_name, sheet_range)
        if not response.success:
            self._report_failure("update sheet data", response)
            return False
        self.refresh()
        self.notifications.success("Sheets data updated successfully")
        return True

    def delete(self, candidate_id: str) -> bool:
        response = self.client.delete_candidate(candidate_id)
        if not response.success:
            self._report_failure("delete sheet data", response)
            return False
        self.refresh()
        self.notifications.success("Sheets data deleted successfully")
        return True

    # Last-chosen candidate, remembered between runs

    @property
    def selected(self) -> str:
        if self.persistence is None:
            return ""
        return self.persistence.load_candidate()

    def select(self, sheet_name: str) -> None:
        if self.persistence is not None:
            self.persistence.save_candidate(sheet_name)
