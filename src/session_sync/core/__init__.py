"""
Core components for Session Sync

Session state, persistence, sheet formatting and export dispatch.
"""

from .exceptions import (
    SessionSyncError,
    ConfigurationError,
    ValidationError,
    TimeFormatError,
    PersistenceError,
    ExternalServiceError,
)
from .logger import setup_logging, get_logger
from .models import Video, Session, CandidateMapping, DEFAULT_TIME
from .session_store import SessionStore

__all__ = [
    'SessionSyncError',
    'ConfigurationError',
    'ValidationError',
    'TimeFormatError',
    'PersistenceError',
    'ExternalServiceError',
    'setup_logging',
    'get_logger',
    'Video',
    'Session',
    'CandidateMapping',
    'DEFAULT_TIME',
    'SessionStore',
]
