"""
Field rules shared by the reservation and webhook schemas.

The strict checks (`check_canonical_date`, `check_canonical_time`,
`check_phone_number`) guard the dashboard API. The lenient normalizers
(`normalize_date`, `normalize_time`) coerce whatever the CallFluent AI
captured on the phone into the canonical `YYYY-MM-DD` / `HH:MM:SS` forms.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from tablebook.errors import InvalidDateFormat, InvalidTimeFormat


DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
TIME_RE = re.compile(r"^\d{2}:\d{2}:\d{2}$", re.ASCII)
PHONE_RE = re.compile(r"^[0-9\s+\-()]+$")

# H, H:MM, H:MM:SS (one or two ASCII hour digits). No AM/PM.
LENIENT_TIME_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?$", re.ASCII)
ORDINAL_RE = re.compile(r"(\d)(st|nd|rd|th)\b", re.IGNORECASE | re.ASCII)

DATE_INPUT_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%A %B %d %Y",
    "%a %b %d %Y",
    "%Y%m%d",
)


def _is_calendar_date(value: str) -> bool:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def check_canonical_date(value: str) -> str:
    if not DATE_RE.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    if not _is_calendar_date(value):
        raise ValueError("Date must be a valid calendar date")
    return value


def check_canonical_time(value: str) -> str:
    if not TIME_RE.match(value):
        raise ValueError("Time must be in HH:MM:SS format")
    hour, minute, second = (int(part) for part in value.split(":"))
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError("Time must be a valid 24-hour time of day")
    return value


def check_phone_number(value: str) -> str:
    if not PHONE_RE.match(value):
        raise ValueError("Phone number may only contain digits, spaces, '+', '-' and parentheses")
    return value


def _parse_iso(value: str) -> Optional[datetime]:
    candidate = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def normalize_date(value: str) -> str:
    """Coerce a free-form date into `YYYY-MM-DD`.

    Raises:
        InvalidDateFormat: when no known format matches
    """
    value = value.strip()
    if DATE_RE.match(value):
        if _is_calendar_date(value):
            return value
        raise InvalidDateFormat()
    
    parsed = _parse_iso(value)
    if parsed is not None:
        return parsed.date().isoformat()
    
    cleaned = ORDINAL_RE.sub(r"\1", value).replace(",", " ")
    cleaned = " ".join(cleaned.split())
    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue
    
    raise InvalidDateFormat()


def normalize_time(value: str) -> str:
    """Pad `H`, `H:MM` or `H:MM:SS` out to `HH:MM:SS`.

    Raises:
        InvalidTimeFormat: for anything else, including AM/PM forms
    """
    match = LENIENT_TIME_RE.match(value.strip())
    if not match:
        raise InvalidTimeFormat()
    
    hour, minute, second = (int(group or 0) for group in match.groups())
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeFormat()
    
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def describe_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """Turn pydantic error dicts into the single `error` string of the envelope"""
    errors = list(errors)
    
    for error in errors:
        if error.get("type") == InvalidDateFormat.code:
            return "Invalid date format"
        if error.get("type") == InvalidTimeFormat.code:
            return "Invalid time format"
    
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    
    return "Invalid request: " + ("; ".join(parts) or "malformed body")
