"""
Error handling utilities for Session Sync

Provides structured error information, remediation hints and the
notification list that user actions report their outcome to.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

MAX_NOTIFICATIONS = 10


class ErrorSeverity(Enum):
    """Error severity levels"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ErrorInfo:
    """Error information container"""
    message: str
    severity: ErrorSeverity
    details: Optional[str] = None
    remediation: Optional[str] = None


@dataclass
class Notification:
    """A user-facing outcome of an action"""
    message: str
    severity: ErrorSeverity = ErrorSeverity.INFO
    title: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class NotificationCenter:
    """Keeps the most recent notifications for the presentation layer"""

    def __init__(self, limit: int = MAX_NOTIFICATIONS):
        self.limit = limit
        self._items: List[Notification] = []

    def add(self, message: str, severity: ErrorSeverity = ErrorSeverity.INFO,
            title: Optional[str] = None) -> Notification:
        notification = Notification(message=message, severity=severity, title=title)
        self._items.append(notification)
        if len(self._items) > self.limit:
            self._items = self._items[-self.limit:]
        return notification

    def success(self, message: str, title: Optional[str] = "Success") -> Notification:
        return self.add(message, ErrorSeverity.SUCCESS, title)

    def warning(self, message: str, title: Optional[str] = None) -> Notification:
        return self.add(message, ErrorSeverity.WARNING, title)

    def error(self, message: str, title: Optional[str] = "Error") -> Notification:
        return self.add(message, ErrorSeverity.ERROR, title)

    def report(self, error_info: ErrorInfo, prefix: Optional[str] = None,
               severity: Optional[ErrorSeverity] = None) -> Notification:
        """Record structured error information, with its remediation hint, as a notification"""
        message = error_info.message
        if prefix:
            message = f"{prefix}: {message}"
        if error_info.remediation:
            message += f" - {error_info.remediation}"
        return self.add(message, severity or error_info.severity, "Error")

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    @property
    def latest(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def drain(self) -> List[Notification]:
        """Return and forget all pending notifications"""
        items, self._items = self._items, []
        return items


class ErrorHandler:
    """Maps raw failures to user-facing error information"""

    @staticmethod
    def get_api_error_info(error_message: str, status_code: Optional[int] = None,
                           service: str = "sync web app") -> ErrorInfo:
        """
        Convert an API error to structured error information with remediation

        Args:
            error_message: Error message from the API client
            status_code: HTTP status code (optional)
            service: Name of the service shown to the user

        Returns:
            ErrorInfo: Structured error information
        """
        if "Connection failed" in error_message:
            return ErrorInfo(
                message=f"Cannot connect to the {service}",
                severity=ErrorSeverity.ERROR,
                details=error_message,
                remediation="Check that the server is running and the base URL is correct",
            )

        if "timeout" in error_message.lower():
            return ErrorInfo(
                message=f"The {service} did not respond in time",
                severity=ErrorSeverity.WARNING,
                details=error_message,
                remediation="Try again in a few moments",
            )

        if status_code == 404:
            return ErrorInfo(
                message="Resource not found",
                severity=ErrorSeverity.WARNING,
                details=error_message,
                remediation="The entry may have been deleted; refresh the candidate list",
            )
        if status_code == 400:
            return ErrorInfo(
                message="Request was rejected",
                severity=ErrorSeverity.ERROR,
                details=error_message,
            )
        if status_code and status_code >= 500:
            return ErrorInfo(
                message="Server internal error",
                severity=ErrorSeverity.ERROR,
                details=error_message,
                remediation="Check the server logs and try again later",
            )

        return ErrorInfo(
            message="API operation failed",
            severity=ErrorSeverity.ERROR,
            details=error_message,
        )
