"""Utility functions."""
from datetime import datetime, timezone
from typing import Any, Optional


def to_number(value: Any) -> Optional[float]:
    """Convert a value to float, returning None if conversion fails."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for Supabase, keeping None as-is."""
    return value.isoformat() if value is not None else None
