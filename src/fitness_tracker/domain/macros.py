"""Domain models for tracked macros and their daily consumption."""

from dataclasses import dataclass, field
from uuid import uuid4


def new_id() -> str:
    """Return a fresh string identifier."""
    return str(uuid4())


@dataclass
class TrackedMacro:
    """A nutrient the user tracks against a daily target."""

    id: str
    name: str
    unit: str
    target: float
    color_hex: str = "#FF3B30"


@dataclass
class MacroConsumption:
    """Cumulative amount of one tracked macro consumed on a day."""

    tracked_macro_id: str
    name: str
    unit: str
    consumed: float = 0.0
    id: str = field(default_factory=new_id)
