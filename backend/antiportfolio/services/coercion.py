"""
Typed extraction from untrusted JSON values.

Every helper takes a raw value as decoded by ``json.loads`` (dict, list, str,
int, float, bool or None) plus a fallback, and always returns a value of the
requested type. None of them raise.
"""
import math
from typing import Any, Iterable, List, Optional


def to_finite_number(raw: Any) -> Optional[float]:
    """Number or numeric string -> float; anything else (bool, NaN, inf, ints past float range) -> None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def clamp(value: float, low: float, high: Optional[float] = None) -> float:
    if value < low:
        return low
    if high is not None and value > high:
        return high
    return value


def coerce_number(raw: Any, low: float, high: Optional[float], fallback: float) -> float:
    """Clamp numbers into [low, high]; non-numeric input takes the fallback."""
    value = to_finite_number(raw)
    if value is None:
        return fallback
    if isinstance(raw, int) and not isinstance(raw, bool):
        return clamp(raw, low, high)
    return clamp(value, low, high)


def coerce_int(raw: Any, low: int, high: Optional[int], fallback: int) -> int:
    value = to_finite_number(raw)
    if value is None:
        return int(fallback)
    # Round half up; Python's round() would pick the even neighbour.
    return int(clamp(math.floor(value + 0.5), low, high))


def coerce_str(raw: Any, fallback: str) -> str:
    """Trimmed non-empty text, or the fallback. Numbers are stringified."""
    if isinstance(raw, str):
        text = raw.strip()
        return text if text else fallback
    if isinstance(raw, (int, float)) and to_finite_number(raw) is not None:
        return str(raw)
    return fallback


def coerce_enum(raw: Any, allowed: Iterable[str], fallback: Optional[str]) -> Optional[str]:
    if isinstance(raw, str):
        candidate = raw.strip().lower()
        for option in allowed:
            if option == candidate:
                return option
    return fallback


def coerce_list(raw: Any, limit: Optional[int] = None) -> list:
    """Arrays are truncated to ``limit``; non-arrays become []. Never padded."""
    if not isinstance(raw, list):
        return []
    return list(raw[:limit]) if limit is not None else list(raw)


def coerce_dict(raw: Any) -> dict:
    return raw if isinstance(raw, dict) else {}


def coerce_str_list(raw: Any, limit: Optional[int] = None) -> List[str]:
    """Keep trimmed, non-empty strings only, then truncate."""
    items = [item.strip() for item in coerce_list(raw) if isinstance(item, str) and item.strip()]
    return items[:limit] if limit is not None else items


def hover_text(text: str, limit: int = 64) -> str:
    return text if len(text) <= limit else f"{text[: limit - 3]}…"


def normalize_url(url: str) -> str:
    """Add https:// when the link has no scheme."""
    trimmed = url.strip()
    if not trimmed or "://" in trimmed:
        return trimmed
    return f"https://{trimmed}"
