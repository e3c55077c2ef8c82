"""
Base exception classes for Session Sync

This module defines the exception hierarchy used by the session store,
the persistence layer and the export transports.
"""

from typing import Optional, Dict, Any


class SessionSyncError(Exception):
    """Base exception for all Session Sync errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(SessionSyncError):
    """Raised when there are configuration-related issues"""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, context)
        self.config_key = config_key


class ValidationError(SessionSyncError):
    """Raised when user input or stored data fails validation"""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None, **kwargs):
        context = kwargs.get('context', {})
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)
        super().__init__(message, context)
        self.field = field
        self.value = value


class TimeFormatError(ValidationError):
    """Raised when a time-of-day string cannot be parsed"""

    def __init__(self, value: str):
        super().__init__(f"Invalid time of day: {value!r}", field="time", value=value)


class PersistenceError(SessionSyncError):
    """Raised when local storage cannot be written"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if key:
            context['key'] = key
        super().__init__(message, context)
        self.key = key


class ExternalServiceError(SessionSyncError):
    """Raised when external services (Sheets API, registry) fail"""

    def __init__(self, message: str, service: Optional[str] = None, status_code: Optional[int] = None, **kwargs):
        context = kwargs.get('context', {})
        if service:
            context['service'] = service
        if status_code:
            context['status_code'] = status_code
        super().__init__(message, context)
        self.service = service
        self.status_code = status_code
