"""
scheduling.py
-------------
Scheduling-time validation for the email tools.

Turns a caller's "send this later" intent into a value Resend accepts as
``scheduled_at``, or raises a ScheduleValidationError whose message can be
shown to the end user as-is.

Three modes:
    iso_date          → parsed, bounded to (now, now + 30 days], re-serialized as UTC
    relative_time     → must read "in <N> minutes/hours/days", passed through
    natural_language  → passed through (timezone appended), Resend parses it

"now" is always passed in by the caller so results are deterministic.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import MINYEAR, datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

MAX_SCHEDULE_DAYS = 30
NATURAL_LANGUAGE_WARN_LENGTH = 50

RELATIVE_TIME_FORMAT = '"in X minutes/hours/days" (e.g., "in 2 hours")'

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}", re.ASCII)
_RELATIVE_TIME = re.compile(
    r"in\s+(\d+)\s+(minute|minutes|hour|hours|day|days)", re.ASCII | re.IGNORECASE
)
_RECOGNIZED_PATTERNS = [
    re.compile(r"in \d+ (minute|minutes|hour|hours|day|days)", re.ASCII | re.IGNORECASE),
    re.compile(
        r"(tomorrow|today|monday|tuesday|wednesday|thursday|friday|saturday|sunday)",
        re.IGNORECASE,
    ),
    re.compile(r"at \d{1,2}(:\d{2})?\s*(am|pm)", re.ASCII | re.IGNORECASE),
]


# ─────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────

class ScheduleValidationError(ValueError):
    """Base class for every local scheduling failure."""


class UnsupportedMode(ScheduleValidationError):
    pass


class EmptyScheduleValue(ScheduleValidationError):
    pass


class MalformedDateTime(ScheduleValidationError):
    pass


class ScheduleNotInFuture(ScheduleValidationError):
    pass


class ScheduleTooFarAhead(ScheduleValidationError):
    pass


class MalformedRelativePhrase(ScheduleValidationError):
    pass


# ─────────────────────────────────────────────
# Models
# ─────────────────────────────────────────────

class ScheduleMode(str, Enum):
    ISO_DATE = "iso_date"
    RELATIVE_TIME = "relative_time"
    NATURAL_LANGUAGE = "natural_language"


@dataclass
class ScheduleRequest:
    mode: Union[ScheduleMode, str]
    raw_value: str
    timezone: Optional[str] = None


@dataclass
class NormalizedSchedule:
    value: str
    mode: ScheduleMode
    warnings: List[str] = field(default_factory=list)


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def mode_for_value(value: str) -> ScheduleMode:
    """Pick a mode for a single free-form scheduledAt string."""
    if _ISO_DATE_PREFIX.match(value.strip()):
        return ScheduleMode.ISO_DATE
    return ScheduleMode.NATURAL_LANGUAGE


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time. Values without an offset are UTC."""
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedDateTime(
            f'Invalid ISO date: "{value}" is not a valid ISO 8601 date '
            f'(e.g., "2024-12-25T10:00:00Z")'
        ) from None
    try:
        return _as_utc(parsed)
    except OverflowError:
        # the offset moves the instant outside datetime's range (year 1 or 9999)
        if parsed.year == MINYEAR:
            raise ScheduleNotInFuture(
                f'Invalid ISO date: Scheduled time must be in the future (got "{value}")'
            ) from None
        raise ScheduleTooFarAhead(
            f'Invalid ISO date: Scheduled time must be within {MAX_SCHEDULE_DAYS} days (got "{value}")'
        ) from None


def format_datetime(instant: datetime) -> str:
    """Serialize as YYYY-MM-DDTHH:MM:SS.mmmZ (microseconds kept when present)."""
    instant = _as_utc(instant)
    timespec = "microseconds" if instant.microsecond % 1000 else "milliseconds"
    return instant.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


# ─────────────────────────────────────────────
# Per-mode normalization
# ─────────────────────────────────────────────

def _normalize_iso_date(raw_value: str, now: datetime) -> str:
    scheduled = parse_datetime(raw_value)
    if scheduled <= now:
        raise ScheduleNotInFuture(
            f"Invalid ISO date: Scheduled time must be in the future "
            f"(got {format_datetime(scheduled)}, now is {format_datetime(now)})"
        )
    if scheduled > now + timedelta(days=MAX_SCHEDULE_DAYS):
        raise ScheduleTooFarAhead(
            f"Invalid ISO date: Scheduled time must be within {MAX_SCHEDULE_DAYS} days "
            f"(got {format_datetime(scheduled)})"
        )
    return format_datetime(scheduled)


def _normalize_relative_time(raw_value: str) -> str:
    match = _RELATIVE_TIME.fullmatch(raw_value)
    if not match or int(match.group(1)) < 1:
        raise MalformedRelativePhrase(
            f'Relative time must be in format: {RELATIVE_TIME_FORMAT}, got "{raw_value}"'
        )
    return raw_value


def _natural_language_warnings(raw_value: str) -> List[str]:
    if any(p.search(raw_value) for p in _RECOGNIZED_PATTERNS):
        return []
    if len(raw_value) > NATURAL_LANGUAGE_WARN_LENGTH:
        return [f'Scheduled time "{raw_value}" may not be in a recognized format']
    return []


# ─────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────

def normalize(request: ScheduleRequest, reference_instant: datetime) -> NormalizedSchedule:
    """
    Validate a scheduling request against ``reference_instant`` ("now").

    Returns a NormalizedSchedule whose ``value`` goes straight into the
    outbound ``scheduledAt`` field. Raises a ScheduleValidationError subclass
    on any rejected input; nothing here touches the network or the clock.
    """
    try:
        mode = ScheduleMode(request.mode)
    except ValueError:
        allowed = ", ".join(m.value for m in ScheduleMode)
        raise UnsupportedMode(
            f"Invalid scheduling option: {request.mode!r} (expected one of: {allowed})"
        ) from None

    raw_value = request.raw_value or ""
    if not raw_value.strip():
        raise EmptyScheduleValue("Schedule value must not be empty")

    now = _as_utc(reference_instant)
    warnings: List[str] = []

    if mode is ScheduleMode.ISO_DATE:
        value = _normalize_iso_date(raw_value, now)
    elif mode is ScheduleMode.RELATIVE_TIME:
        value = _normalize_relative_time(raw_value)
    else:
        warnings = _natural_language_warnings(raw_value)
        value = f"{raw_value} {request.timezone}" if request.timezone else raw_value

    for warning in warnings:
        logger.warning(f"Warning: {warning}")
    logger.debug(f"Schedule normalized | mode={mode.value} | raw={raw_value!r} | value={value!r}")

    return NormalizedSchedule(value=value, mode=mode, warnings=warnings)
