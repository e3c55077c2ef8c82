"""Data models for recording sessions and export candidates."""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ValidationError

# Doubles as "not recorded"; a real midnight recording looks the same
DEFAULT_TIME = "00:00:00"

SESSION_FIELDS = ("session_id", "high_impedance", "low_impedance")
VIDEO_FIELDS = ("start_time", "end_time", "notes")
TIME_FIELDS = ("start_time", "end_time")


@dataclass(frozen=True)
class Video:
    """Timing and notes for a single video recording."""
    start_time: str = DEFAULT_TIME
    end_time: str = DEFAULT_TIME
    last_updated: Optional[str] = None
    notes: str = ""

    @property
    def is_recorded(self) -> bool:
        return self.start_time != DEFAULT_TIME

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "lastUpdated": self.last_updated,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Video":
        if not isinstance(data, dict):
            raise ValidationError("Video entry must be an object", value=data)
        try:
            video = cls(
                start_time=data["startTime"],
                end_time=data["endTime"],
                last_updated=data.get("lastUpdated"),
                notes=data.get("notes", ""),
            )
        except KeyError as e:
            raise ValidationError("Video entry is missing a field", field=str(e)) from None
        for name in ("start_time", "end_time", "notes"):
            if not isinstance(getattr(video, name), str):
                raise ValidationError("Video field must be a string", field=name)
        return video


@dataclass(frozen=True)
class Session:
    """All data recorded for one session: metadata plus a fixed run of videos."""
    session_id: str = ""
    high_impedance: str = ""
    low_impedance: str = ""
    videos: Tuple[Video, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls, videos_per_session: int) -> "Session":
        return cls(videos=tuple(Video() for _ in range(videos_per_session)))

    @property
    def impedance_label(self) -> str:
        return f"H-{self.high_impedance}K/L-{self.low_impedance}K"

    def with_video(self, video_index: int, video: Video) -> "Session":
        videos = list(self.videos)
        videos[video_index] = video
        return replace(self, videos=tuple(videos))

    def cleared(self) -> "Session":
        return replace(self, videos=tuple(Video() for _ in self.videos))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "highImpedance": self.high_impedance,
            "lowImpedance": self.low_impedance,
            "videos": [video.to_dict() for video in self.videos],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        if not isinstance(data, dict):
            raise ValidationError("Session entry must be an object", value=data)
        videos = data.get("videos")
        if not isinstance(videos, list):
            raise ValidationError("Session videos must be a list", field="videos")
        session = cls(
            session_id=data.get("sessionId", ""),
            high_impedance=data.get("highImpedance", ""),
            low_impedance=data.get("lowImpedance", ""),
            videos=tuple(Video.from_dict(v) for v in videos),
        )
        for name in SESSION_FIELDS:
            if not isinstance(getattr(session, name), str):
                raise ValidationError("Session field must be a string", field=name)
        return session


class CandidateMapping(BaseModel):
    """Export destination: a sheet tab and the row its block starts on."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias="_id")
    sheet_name: str = Field(alias="sheetName", min_length=1)
    sheet_range: str = Field(alias="sheetRange", min_length=1)

    @field_validator("sheet_range", mode="before")
    @classmethod
    def coerce_range(cls, v):
        # Older registry entries stored the anchor as a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("sheet_name", "sheet_range")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()
