"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Screen(str, enum.Enum):
    """The fixed set of screens the router can display."""

    HOME = "home"
    ROUTINE = "routine"
    STUDY = "study"
    PROGRESS = "progress"
    PROFILE = "profile"


class RoutineType(str, enum.Enum):
    """Routine categories."""

    HABIT = "habit"
    STUDY = "study"
    WELLNESS = "wellness"


class Profile(BaseModel):
    """The user's profile. An empty ``cloud_url`` disables sync."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = "Guest"
    focus: str = "Personal Growth"
    cloud_url: str = Field(default="", alias="cloudUrl")

    @property
    def sync_enabled(self) -> bool:
        return bool(self.cloud_url.strip())


# Keys accepted by the profile-field update action, mapped to model fields.
PROFILE_FIELDS: dict[str, str] = {
    "name": "name",
    "focus": "focus",
    "cloudUrl": "cloud_url",
}


class Routine(BaseModel):
    """A recurring scheduled task with a completion flag."""

    id: int
    title: str
    time: str
    completed: bool = False
    type: RoutineType = RoutineType.HABIT


class RoutineCreate(BaseModel):
    """Input model for adding a routine."""

    title: str = Field(min_length=1, max_length=200)
    time: str = Field(min_length=1, max_length=20)
    type: RoutineType = RoutineType.HABIT


class StudySession(BaseModel):
    """A completed focus interval. Never mutated after creation.

    Serialized with the field names the remote sheet reads
    (``subject``, ``duration``, ``date``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    subject: str = "Deep Work"
    duration_minutes: int = Field(gt=0, alias="duration")
    timestamp: datetime = Field(default_factory=_utcnow, alias="date")


class Quote(BaseModel):
    """A static quote shown on the home screen."""

    model_config = ConfigDict(frozen=True)

    text: str
    author: str


class TimerPhase(str, enum.Enum):
    """Derived timer phase; idle and paused both have ``running=False``."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerState(BaseModel):
    """Snapshot of the countdown."""

    remaining_seconds: int = Field(ge=0)
    session_seconds: int = Field(gt=0)
    running: bool = False

    @property
    def phase(self) -> TimerPhase:
        if self.running:
            return TimerPhase.RUNNING
        if self.remaining_seconds == self.session_seconds:
            return TimerPhase.IDLE
        return TimerPhase.PAUSED

    @property
    def display(self) -> str:
        mins, secs = divmod(self.remaining_seconds, 60)
        return f"{mins:02d}:{secs:02d}"


class SyncKind(str, enum.Enum):
    """Message types posted to the sync endpoint."""

    SYNC_ROUTINES = "sync_routines"
    LOG_SESSION = "log_session"


class SyncStatus(BaseModel):
    """Outcome of the most recent sync push."""

    kind: SyncKind
    ok: bool
    detail: str = ""
    at: datetime = Field(default_factory=_utcnow)


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/lifetrack/config.json)."""

    data_dir: Optional[str] = None  # None = use default (~/.local/share/lifetrack/)
    log_level: str = "WARNING"
