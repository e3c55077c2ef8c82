"""
Session state store

Owns the ordered sessions and the navigation cursor. Every mutation
replaces the affected records and immediately writes the whole collection
back through the persistence port.
"""

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Tuple

from .exceptions import ValidationError
from .logger import get_logger
from .models import Session, SESSION_FIELDS, VIDEO_FIELDS, TIME_FIELDS
from .persistence import SessionPersistence
from .time_format import current_time_string, human_timestamp

logger = get_logger(__name__)

DEFAULT_SESSION_COUNT = 12
DEFAULT_VIDEOS_PER_SESSION = 6


class SessionStore:
    """
    In-memory session state synchronized to persistence

    Args:
        persistence: Port used to load prior state and save every change
        session_count: Number of sessions in a shift
        videos_per_session: Number of videos in every session
        clock: Source of the current time, injectable for tests
    """

    def __init__(
        self,
        persistence: SessionPersistence,
        session_count: int = DEFAULT_SESSION_COUNT,
        videos_per_session: int = DEFAULT_VIDEOS_PER_SESSION,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if session_count < 1 or videos_per_session < 1:
            raise ValidationError("Session and video counts must be positive")

        self.persistence = persistence
        self.session_count = session_count
        self.videos_per_session = videos_per_session
        self.clock = clock

        self._sessions, self._current_index = self._load_initial_state()

    def _default_sessions(self) -> Tuple[Session, ...]:
        return tuple(Session.empty(self.videos_per_session) for _ in range(self.session_count))

    def _load_initial_state(self) -> Tuple[Tuple[Session, ...], int]:
        state = self.persistence.load()
        sessions = state.sessions

        if sessions is not None and not self._has_expected_shape(sessions):
            logger.warning(f"Persisted sessions ({len(sessions)}) do not match the configured layout, starting fresh")
            sessions = None
        if sessions is None:
            sessions = self._default_sessions()

        index = state.current_index or 0
        index = min(max(index, 0), len(sessions) - 1)
        return sessions, index

    def _has_expected_shape(self, sessions: Tuple[Session, ...]) -> bool:
        return len(sessions) == self.session_count and all(
            len(session.videos) == self.videos_per_session for session in sessions
        )

    # Read access

    @property
    def sessions(self) -> Tuple[Session, ...]:
        """Immutable snapshot of all sessions."""
        return self._sessions

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_session(self) -> Session:
        return self._sessions[self._current_index]

    # Mutations

    def _commit(self, sessions: Tuple[Session, ...], current_index: int) -> None:
        # Memory only moves forward once the full write has succeeded
        self.persistence.save(sessions, current_index)
        self._sessions = sessions
        self._current_index = current_index

    def _valid_session_index(self, session_index: int) -> bool:
        if 0 <= session_index < len(self._sessions):
            return True
        logger.warning(f"Ignoring update for unknown session {session_index}",
                       extra={"session_index": session_index})
        return False

    def _replace_session(self, session_index: int, session: Session) -> None:
        sessions = list(self._sessions)
        sessions[session_index] = session
        self._commit(tuple(sessions), self._current_index)

    def update_session_field(self, session_index: int, field: str, value: str) -> None:
        """Set session_id, high_impedance or low_impedance on one session."""
        if field not in SESSION_FIELDS:
            raise ValidationError(f"Unknown session field: {field}", field=field, value=value)
        if not self._valid_session_index(session_index):
            return

        session = self._sessions[session_index]
        self._replace_session(session_index, replace(session, **{field: value}))

    def update_video_field(self, session_index: int, video_index: int, field: str, value: str) -> None:
        """
        Set start_time, end_time or notes on one video

        Time fields also stamp last_updated; editing notes leaves it alone.
        """
        if field not in VIDEO_FIELDS:
            raise ValidationError(f"Unknown video field: {field}", field=field, value=value)
        if not self._valid_session_index(session_index):
            return

        session = self._sessions[session_index]
        if not 0 <= video_index < len(session.videos):
            logger.warning(f"Ignoring update for unknown video {video_index}",
                           extra={"session_index": session_index, "video_index": video_index})
            return

        changes = {field: value}
        if field in TIME_FIELDS:
            changes["last_updated"] = human_timestamp(self.clock())

        video = replace(session.videos[video_index], **changes)
        self._replace_session(session_index, session.with_video(video_index, video))

    def record_now(self, video_index: int, which: str) -> str:
        """Record the current wall-clock time as a video's start or end in the current session."""
        if which not in TIME_FIELDS:
            raise ValidationError(f"Can only record start_time or end_time, got {which}", field=which)

        now = current_time_string(self.clock())
        self.update_video_field(self._current_index, video_index, which, now)
        return now

    def clear_session(self, session_index: Optional[int] = None) -> None:
        """Reset every video of a session (default: the current one) to defaults."""
        if session_index is None:
            session_index = self._current_index
        if not self._valid_session_index(session_index):
            return

        self._replace_session(session_index, self._sessions[session_index].cleared())
        logger.info(f"Cleared session {session_index + 1}", extra={"session_index": session_index})

    def next_session(self) -> int:
        if self._current_index < len(self._sessions) - 1:
            self._commit(self._sessions, self._current_index + 1)
        return self._current_index

    def prev_session(self) -> int:
        if self._current_index > 0:
            self._commit(self._sessions, self._current_index - 1)
        return self._current_index
