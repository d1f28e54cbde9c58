"""Label formatting and parsing for numeric quantities."""

import math

_COMPACT_UNITS = {"cal", "kcal", "mL", "L", "%"}


def format_value(value: float, unit: str) -> str:
    """Format a quantity with its unit, e.g. ``"100 g"`` or ``"250mL"``."""
    rounded = round(value, 1)
    if math.isclose(rounded, round(rounded)):
        number = str(int(round(rounded)))
    else:
        number = f"{rounded:.1f}"
    unit = unit.strip()
    if not unit:
        return number
    if unit in _COMPACT_UNITS:
        return f"{number}{unit}"
    return f"{number} {unit}"


def parse_numeric_value(label: str) -> float | None:
    """Return the leading number of a label, or None when it has no digits."""
    number = _leading_number(label)
    if not any(char.isdigit() for char in number):
        return None
    return float(number)


def parse_unit_suffix(label: str) -> str:
    """Return the unit text that follows the leading number of a label."""
    stripped = label.strip()
    number = _leading_number(stripped)
    return "".join(stripped[len(number) :].split())


def format_duration(hours: float) -> str:
    """Format an hour count as ``"05h 30m"``."""
    safe_hours = max(hours, 0.0)
    whole_hours = int(safe_hours)
    minutes = int((safe_hours - whole_hours) * 60)
    return f"{whole_hours:02d}h {minutes:02d}m"


def _leading_number(label: str) -> str:
    chars: list[str] = []
    seen_point = False
    for char in label.strip():
        if char.isdigit():
            chars.append(char)
        elif char == "." and not seen_point:
            seen_point = True
            chars.append(char)
        else:
            break
    return "".join(chars)
