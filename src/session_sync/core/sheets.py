"""
Sheet update transports

The export dispatcher writes through one of these: either the web app's
export endpoint, or Google Sheets directly with a service account.
"""

import base64
import binascii
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from ..utils.api_client import SheetSyncApiClient
from .exceptions import ConfigurationError, ExternalServiceError
from .logger import get_logger
from .settings import Settings

logger = get_logger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']


class SheetUpdater:
    """Writes a grid of values to a spreadsheet range"""

    def update(self, range_name: str, values: List[List[Any]]) -> str:
        """Write values; return a success message or raise ExternalServiceError"""
        raise NotImplementedError


class ApiSheetUpdater(SheetUpdater):
    """Exports through the web app's /api/googlesheet endpoint"""

    def __init__(self, client: SheetSyncApiClient):
        self.client = client

    def update(self, range_name: str, values: List[List[Any]]) -> str:
        response = self.client.update_sheet(range_name, values)
        if not response.success:
            raise ExternalServiceError(
                response.error or "Failed to update sheet",
                service="sheet export",
                status_code=response.status_code,
            )
        data = response.data if isinstance(response.data, dict) else {}
        return data.get("message", "Sheet updated successfully")


def load_service_account_info(credentials_file: Optional[Path] = None,
                              credentials_b64: Optional[str] = None) -> Dict[str, Any]:
    """Read service account JSON from a file or a base64-encoded string"""
    try:
        if credentials_file:
            with open(credentials_file, encoding="utf-8") as f:
                return json.load(f)
        if credentials_b64:
            return json.loads(base64.b64decode(credentials_b64).decode("utf-8"))
    except (OSError, ValueError, binascii.Error) as e:
        raise ConfigurationError(f"Could not load service account credentials: {e}",
                                 config_key="export.credentials") from e
    raise ConfigurationError("Direct export requires service account credentials",
                             config_key="export.credentials_file")


class GspreadSheetUpdater(SheetUpdater):
    """Writes to Google Sheets directly using gspread"""

    def __init__(self, spreadsheet_id: str, credentials_info: Dict[str, Any]):
        if not spreadsheet_id:
            raise ConfigurationError("Direct export requires a spreadsheet ID",
                                     config_key="export.spreadsheet_id")
        self.spreadsheet_id = spreadsheet_id
        self.credentials_info = credentials_info
        self._spreadsheet = None

    def _open_spreadsheet(self):
        if self._spreadsheet is None:
            creds = Credentials.from_service_account_info(self.credentials_info, scopes=SCOPES)
            client = gspread.authorize(creds)
            self._spreadsheet = client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def update(self, range_name: str, values: List[List[Any]]) -> str:
        try:
            spreadsheet = self._open_spreadsheet()
            spreadsheet.values_update(
                range_name,
                params={'valueInputOption': 'RAW'},
                body={'values': values},
            )
        except gspread.exceptions.APIError as e:
            raise ExternalServiceError(f"Google Sheets rejected the update: {e}",
                                       service="google sheets",
                                       status_code=getattr(e, "code", None)) from e
        except (gspread.exceptions.GSpreadException, GoogleAuthError,
                requests.RequestException, ValueError) as e:
            raise ExternalServiceError(f"Google Sheets update failed: {e}",
                                       service="google sheets") from e

        logger.info(f"Updated {range_name} directly", extra={"range": range_name})
        return "Sheet updated successfully"


def create_sheet_updater(settings: Settings, client: SheetSyncApiClient) -> SheetUpdater:
    """Pick the transport configured by export.mode"""
    export = settings.export
    if export.mode == "direct":
        info = load_service_account_info(export.credentials_file, export.credentials_b64)
        return GspreadSheetUpdater(export.spreadsheet_id, info)
    return ApiSheetUpdater(client)
