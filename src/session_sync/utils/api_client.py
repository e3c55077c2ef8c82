"""
API client for the session sync web app

Talks to the candidate registry (``/api/sheet``) and the Google Sheets
export endpoint (``/api/googlesheet``). Every call returns an ApiResponse;
transport failures are reported, never raised. Nothing is retried.
"""

import requests
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

CANDIDATES_ENDPOINT = "/api/sheet"
SHEET_UPDATE_ENDPOINT = "/api/googlesheet"

CellValue = Union[str, int, float, None]


@dataclass
class ApiResponse:
    """Standardized API response wrapper"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class SheetSyncApiClient:
    """
    API client for the candidate registry and sheet export endpoints

    Args:
        base_url: Base URL of the web app
        timeout: Request timeout in seconds
    """

    def __init__(self, base_url: str = "http://localhost:3000", timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Any] = None,
        params: Optional[Dict] = None,
    ) -> ApiResponse:
        """
        Make HTTP request and wrap the outcome

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            data: Request body data
            params: Query parameters

        Returns:
            ApiResponse: Standardized response wrapper
        """
        url = f"{self.base_url}{endpoint}"

        try:
            logger.debug(f"Making {method} request to {url}")

            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                timeout=self.timeout
            )

            if 200 <= response.status_code < 300:
                try:
                    response_data = response.json()
                except ValueError:
                    # Non-JSON response
                    response_data = {"raw_response": response.text}
                return ApiResponse(
                    success=True,
                    data=response_data,
                    status_code=response.status_code
                )

            error_message = f"HTTP {response.status_code}"
            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    error_message = error_data.get('error') or error_data.get('detail') or error_message
            except ValueError:
                error_message = response.text or error_message

            logger.warning(f"{method} {endpoint} failed: {error_message}",
                           extra={"status_code": response.status_code})
            return ApiResponse(
                success=False,
                error=error_message,
                status_code=response.status_code
            )

        except requests.ConnectionError as e:
            logger.error(f"Connection error: {e}")
            return ApiResponse(
                success=False,
                error=f"Connection failed: {str(e)}"
            )
        except requests.Timeout as e:
            logger.error(f"Request timeout: {e}")
            return ApiResponse(
                success=False,
                error=f"Request timeout: {str(e)}"
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            return ApiResponse(
                success=False,
                error=f"Request failed: {str(e)}"
            )

    # Candidate registry

    def list_candidates(self) -> ApiResponse:
        """Fetch every sheet mapping; data is a list of {_id, sheetName, sheetRange}"""
        response = self._make_request('GET', CANDIDATES_ENDPOINT)
        if response.success and not isinstance(response.data, list):
            return ApiResponse(
                success=False,
                error="Malformed candidate list",
                status_code=response.status_code
            )
        return response

    def create_candidate(self, sheet_name: str, sheet_range: str) -> ApiResponse:
        return self._make_request('POST', CANDIDATES_ENDPOINT, data={
            'sheetName': sheet_name,
            'sheetRange': sheet_range,
        })

    def update_candidate(self, candidate_id: str, sheet_name: str, sheet_range: str) -> ApiResponse:
        return self._make_request('PUT', CANDIDATES_ENDPOINT, params={'id': candidate_id}, data={
            'sheetName': sheet_name,
            'sheetRange': sheet_range,
        })

    def delete_candidate(self, candidate_id: str) -> ApiResponse:
        return self._make_request('DELETE', CANDIDATES_ENDPOINT, params={'id': candidate_id})

    # Sheet export

    def update_sheet(self, range_name: str, values: List[List[CellValue]]) -> ApiResponse:
        """
        Write values to a spreadsheet range through the web app

        Args:
            range_name: A1 range including the tab, e.g. "Alice!314:387"
            values: Rows of cell values

        Returns:
            ApiResponse: data holds {"message": ...} on success
        """
        return self._make_request('POST', SHEET_UPDATE_ENDPOINT, data={
            'range': range_name,
            'values': values,
        })


def create_api_client(base_url: str = "http://localhost:3000", timeout: int = 30) -> SheetSyncApiClient:
    """
    Create and return a configured API client instance

    Args:
        base_url: Base URL for the web app
        timeout: Request timeout in seconds

    Returns:
        SheetSyncApiClient: Configured client instance
    """
    return SheetSyncApiClient(base_url=base_url, timeout=timeout)
