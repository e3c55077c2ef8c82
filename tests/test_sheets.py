"""Test the sheet update transports."""

import base64
import json
import pytest
from unittest.mock import MagicMock, patch

import gspread

from session_sync.core.exceptions import ConfigurationError, ExternalServiceError
from session_sync.core.settings import Settings
from session_sync.core.sheets import (
    ApiSheetUpdater,
    GspreadSheetUpdater,
    create_sheet_updater,
    load_service_account_info,
)
from session_sync.utils.api_client import ApiResponse

SERVICE_ACCOUNT = {"type": "service_account", "client_email": "sync@example.iam.gserviceaccount.com"}


class TestApiSheetUpdater:

    def test_success_returns_server_message(self, mock_client):
        assert ApiSheetUpdater(mock_client).update("Alice!1:74", [["x"]]) == "Sheet updated successfully"
        mock_client.update_sheet.assert_called_once_with("Alice!1:74", [["x"]])

    def test_failure_raises_external_service_error(self, mock_client):
        mock_client.update_sheet.return_value = ApiResponse(success=False, error="Internal Server Error", status_code=500)
        with pytest.raises(ExternalServiceError) as exc_info:
            ApiSheetUpdater(mock_client).update("Alice!1:74", [])
        assert exc_info.value.status_code == 500


class TestServiceAccountInfo:

    def test_from_file(self, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps(SERVICE_ACCOUNT))
        assert load_service_account_info(credentials_file=path) == SERVICE_ACCOUNT

    def test_from_base64(self):
        encoded = base64.b64encode(json.dumps(SERVICE_ACCOUNT).encode()).decode()
        assert load_service_account_info(credentials_b64=encoded) == SERVICE_ACCOUNT

    def test_missing(self):
        with pytest.raises(ConfigurationError):
            load_service_account_info()

    def test_garbage(self):
        with pytest.raises(ConfigurationError):
            load_service_account_info(credentials_b64="not base64 json!")


class TestGspreadSheetUpdater:

    def test_requires_spreadsheet_id(self):
        with pytest.raises(ConfigurationError):
            GspreadSheetUpdater("", SERVICE_ACCOUNT)

    @patch("session_sync.core.sheets.gspread.authorize")
    @patch("session_sync.core.sheets.Credentials.from_service_account_info")
    def test_writes_raw_values(self, from_info, authorize):
        spreadsheet = MagicMock()
        authorize.return_value.open_by_key.return_value = spreadsheet

        updater = GspreadSheetUpdater("sheet-123", SERVICE_ACCOUNT)
        updater.update("Alice!314:387", [["07 Oct 2026"]])
        updater.update("Alice!314:387", [["08 Oct 2026"]])

        authorize.return_value.open_by_key.assert_called_once_with("sheet-123")
        spreadsheet.values_update.assert_called_with(
            "Alice!314:387",
            params={"valueInputOption": "RAW"},
            body={"values": [["08 Oct 2026"]]},
        )

    @patch("session_sync.core.sheets.gspread.authorize")
    @patch("session_sync.core.sheets.Credentials.from_service_account_info")
    def test_gspread_errors_become_external_service_errors(self, from_info, authorize):
        authorize.return_value.open_by_key.side_effect = gspread.exceptions.SpreadsheetNotFound("gone")

        with pytest.raises(ExternalServiceError):
            GspreadSheetUpdater("sheet-123", SERVICE_ACCOUNT).update("Alice!1:74", [])


def test_create_sheet_updater_defaults_to_api(mock_client):
    assert isinstance(create_sheet_updater(Settings(), mock_client), ApiSheetUpdater)


def test_create_sheet_updater_direct_mode(mock_client, tmp_path):
    path = tmp_path / "creds.json"
    path.write_text(json.dumps(SERVICE_ACCOUNT))
    settings = Settings(export={"mode": "direct", "spreadsheet_id": "sheet-123", "credentials_file": path})

    updater = create_sheet_updater(settings, mock_client)

    assert isinstance(updater, GspreadSheetUpdater)
    assert updater.spreadsheet_id == "sheet-123"
