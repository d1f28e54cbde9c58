"""Domain models for intermittent fasting."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class FastingProtocol(StrEnum):
    """Preset fasting/eating windows plus a custom duration."""

    TWELVE_TWELVE = "12:12"
    FOURTEEN_TEN = "14:10"
    SIXTEEN_EIGHT = "16:8"
    CUSTOM = "custom"


@dataclass
class FastingState:
    """Persisted state of the active fast."""

    protocol: FastingProtocol = FastingProtocol.SIXTEEN_EIGHT
    custom_minutes: int = 16 * 60
    started_at: datetime | None = None
    duration_minutes: int | None = None
    completion_signalled: bool = False
    was_over_time: bool = False


@dataclass(frozen=True)
class FastingStatus:
    """Derived view of a fast at a point in time."""

    is_running: bool
    protocol_label: str
    duration_minutes: int
    elapsed_seconds: float
    remaining_seconds: float
    progress: float
    is_over_time: bool
    remaining_label: str
