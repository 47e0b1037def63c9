# app/utils/formatting.py
"""Small display/normalisation helpers shared by the row builder and filters."""

from datetime import datetime
from typing import Any, Optional


def is_set(value: Any) -> bool:
    """True for a present reference. Upstream sends both null and "" for 'unset'."""
    return value is not None and value != ""


def normalize_uuid(value: Optional[str]) -> str:
    """Strip hyphens and lower-case, so 'AB-12' and 'ab12' compare equal."""
    if value is None:
        return ""
    return str(value).replace("-", "").strip().lower()


def same_uuid(a: Optional[str], b: Optional[str]) -> bool:
    na, nb = normalize_uuid(a), normalize_uuid(b)
    return bool(na) and na == nb


def format_display_datetime(value: Optional[datetime]) -> str:
    """dd/mm/yyyy h:mm am|pm, e.g. 05/03/2024 9:07 pm. Empty string for None."""
    if value is None:
        return ""
    hours = value.hour % 12 or 12
    ampm = "pm" if value.hour >= 12 else "am"
    return f"{value.day:02d}/{value.month:02d}/{value.year} {hours}:{value.minute:02d} {ampm}"
