from collections.abc import Hashable
from datetime import datetime, timezone


def now_utc_iso() -> str:
    """UTC timestamp in the browser's ``Date.toISOString`` form (ms precision, ``Z``)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def as_list(val) -> list:
    return val if isinstance(val, list) else []


def as_mapping(val) -> dict:
    return val if isinstance(val, dict) else {}


def is_hashable(val) -> bool:
    return isinstance(val, Hashable)


def coerce_number(val):
    """Numeric value of a JSON scalar, or None. Booleans are not numbers here."""
    if isinstance(val, bool) or val is None:
        return None
    if isinstance(val, (int, float)):
        return val
    if isinstance(val, str):
        try:
            return float(val.strip())
        except ValueError:
            return None
    return None
