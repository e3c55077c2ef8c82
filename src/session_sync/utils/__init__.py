"""
Utilities package for Session Sync

Provides the web app API client and the error/notification helpers
used by the command-line front end.
"""

from .api_client import SheetSyncApiClient, create_api_client, ApiResponse
from .error_handler import (
    ErrorHandler,
    ErrorInfo,
    ErrorSeverity,
    Notification,
    NotificationCenter,
)

__all__ = [
    # API Client
    'SheetSyncApiClient',
    'create_api_client',
    'ApiResponse',

    # Error handling
    'ErrorHandler',
    'ErrorInfo',
    'ErrorSeverity',
    'Notification',
    'NotificationCenter',
]
