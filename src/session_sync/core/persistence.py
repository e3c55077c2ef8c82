"""
Persistence port for session state

The session store depends only on ``load``/``save``. The local storage
implementation keeps the browser-compatible layout: a JSON array under
``sessions``, the cursor as a plain integer string under ``currentSession``
and the last-chosen export candidate under ``candidate``.
"""

import json
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .exceptions import ValidationError
from .logger import get_logger
from .models import Session
from .storage import LocalStorage

logger = get_logger(__name__)

SESSIONS_KEY = "sessions"
CURRENT_SESSION_KEY = "currentSession"
CANDIDATE_KEY = "candidate"


@dataclass
class PersistedState:
    """Whatever could be recovered from storage; None means "no prior state"."""
    sessions: Optional[Tuple[Session, ...]] = None
    current_index: Optional[int] = None


class SessionPersistence:
    """Interface the session store persists through"""

    def load(self) -> PersistedState:
        raise NotImplementedError

    def save(self, sessions: Sequence[Session], current_index: int) -> None:
        raise NotImplementedError


class LocalStoragePersistence(SessionPersistence):
    """Session persistence on top of a LocalStorage backend"""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def load(self) -> PersistedState:
        return PersistedState(
            sessions=self._load_sessions(),
            current_index=self._load_current_index(),
        )

    def _load_sessions(self) -> Optional[Tuple[Session, ...]]:
        raw = self.storage.get_item(SESSIONS_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValidationError("Persisted sessions must be a list", field=SESSIONS_KEY)
            return tuple(Session.from_dict(item) for item in data)
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Ignoring unreadable persisted sessions: {e}")
            return None

    def _load_current_index(self) -> Optional[int]:
        raw = self.storage.get_item(CURRENT_SESSION_KEY)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.debug(f"Ignoring unreadable current session index: {raw!r}")
            return None

    def save(self, sessions: Sequence[Session], current_index: int) -> None:
        payload = json.dumps([session.to_dict() for session in sessions])
        self.storage.set_item(SESSIONS_KEY, payload)
        self.storage.set_item(CURRENT_SESSION_KEY, str(current_index))

    def load_candidate(self) -> str:
        return self.storage.get_item(CANDIDATE_KEY) or ""

    def save_candidate(self, candidate: str) -> None:
        self.storage.set_item(CANDIDATE_KEY, candidate)
