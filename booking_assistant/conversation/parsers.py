"""
Entity parsers for free-text booking messages.

Each parser takes the raw message, normalizes it, and returns a typed value
or None. None is the only failure signal; nothing here raises on bad input.

Usage:
    choice = parse_day_choice("next friday works", now=date(2026, 2, 9))
    time = parse_time_choice("2pm", {"1": "10:00", "2": "14:00"})
    name = sanitize_name("  Dana   Levi ")
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from booking_assistant.config import settings
from booking_assistant.utils import collapse_whitespace, normalize_text

logger = logging.getLogger(__name__)

ReferenceTime = Union[date, datetime]

WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Python weekday numbering: Monday is 0.
WEEKDAYS: dict[str, int] = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2, "weds": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

_TODAY_RE = re.compile(r"\btoday\b")
_TOMORROW_RE = re.compile(r"\btomorrow\b")
# Loose on purpose: any year-first date claims its span, valid or not.
_ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})(?:[/-](\d{4}|\d{2}))?\b")
_WEEKDAY_RE = re.compile(
    r"\b(" + "|".join(sorted(WEEKDAYS, key=len, reverse=True)) + r")\b"
)

_EXACT_OPTION_RE = re.compile(r"^(?:option\s*)?([1-9]\d*)$")
_OPTION_IN_TEXT_RE = re.compile(r"\boption\s*([1-9]\d*)\b")
_CLOCK_TIME_RE = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b")


@dataclass(frozen=True)
class DayChoice:
    """A resolved calendar day and its display label."""

    iso_date: str
    label: str


def format_day_label(day: date) -> str:
    """Render a date as e.g. 'Thursday, Feb 12'."""
    return f"{WEEKDAY_NAMES[day.weekday()]}, {MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def _reference_date(now: Optional[ReferenceTime]) -> date:
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        return now.date()
    return now


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _iso_match_to_date(match: re.Match) -> Optional[date]:
    """Only zero-padded YYYY-MM-DD naming a real day is accepted."""
    year, month, day = match.groups()
    if len(month) != 2 or len(day) != 2:
        return None
    return _safe_date(int(year), int(month), int(day))


def _parse_numeric_date(text: str, today: date) -> Optional[date]:
    match = _NUMERIC_DATE_RE.search(text)
    if not match:
        return None
    month, day = int(match.group(1)), int(match.group(2))
    year = int(match.group(3)) if match.group(3) else today.year
    if year < 100:
        year += 2000
    return _safe_date(year, month, day)


def _parse_weekday(text: str, today: date) -> Optional[date]:
    match = _WEEKDAY_RE.search(text)
    if not match:
        return None
    offset = (WEEKDAYS[match.group(1)] - today.weekday()) % 7
    return today + timedelta(days=offset)


def parse_day_choice(message: str, now: Optional[ReferenceTime] = None) -> Optional[DayChoice]:
    """
    Resolve the day a customer asked for.

    An ISO date wins over everything else. Then 'today', 'tomorrow', a
    numeric M/D[/YY[YY]] date, and finally a weekday name, which resolves
    to its next occurrence on or after today. A year-first date that is not
    a real YYYY-MM-DD day fails the whole parse.

    Args:
        message: Raw customer text.
        now: Reference point for relative words. Defaults to the local clock.
    """
    text = normalize_text(message)
    today = _reference_date(now)

    iso = _ISO_DATE_RE.search(text)
    if iso:
        resolved = _iso_match_to_date(iso)
    else:
        resolved = (
            (today if _TODAY_RE.search(text) else None)
            or (today + timedelta(days=1) if _TOMORROW_RE.search(text) else None)
            or _parse_numeric_date(text, today)
            or _parse_weekday(text, today)
        )
    if resolved is None:
        logger.debug("No day found in '%s'", text)
        return None
    return DayChoice(iso_date=resolved.isoformat(), label=format_day_label(resolved))


def normalize_clock_time(value: str) -> Optional[str]:
    """
    Normalize a clock time to 24-hour 'HH:MM'.

    Accepts 'H', 'H:MM' and either with an am/pm suffix. With a suffix the
    hour must be 1-12; without one it must be 0-23. Minutes must be 0-59.

    Examples:
        >>> normalize_clock_time("12am")
        '00:00'
        >>> normalize_clock_time("2:30 PM")
        '14:30'
        >>> normalize_clock_time("13pm") is None
        True
    """
    match = _CLOCK_TIME_RE.search(normalize_text(value))
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    period = match.group(3)

    if minute > 59:
        return None
    if period:
        if not 1 <= hour <= 12:
            return None
        if period == "pm" and hour != 12:
            hour += 12
        elif period == "am" and hour == 12:
            hour = 0
    elif hour > 23:
        return None

    return f"{hour:02d}:{minute:02d}"


def parse_time_choice(message: str, available_slots: Optional[dict[str, str]]) -> Optional[str]:
    """
    Pick one of the offered slots from a customer's reply.

    A bare option number ('2', 'option 2') selects that key and nothing
    else. Otherwise 'option N' anywhere in the text is tried, then the text
    is read as a clock time and matched against each slot's canonical time.

    Returns:
        The offered slot value, or None if nothing offered matches.
    """
    if not available_slots:
        return None

    text = normalize_text(message)
    exact = _EXACT_OPTION_RE.match(text)
    if exact:
        return available_slots.get(exact.group(1))

    in_text = _OPTION_IN_TEXT_RE.search(text)
    if in_text and in_text.group(1) in available_slots:
        return available_slots[in_text.group(1)]

    requested = normalize_clock_time(text)
    if requested is None:
        return None

    for slot in available_slots.values():
        if normalize_clock_time(slot) == requested:
            return slot
    logger.debug("Requested time %s is not among offered slots", requested)
    return None


def sanitize_name(message: str, min_length: Optional[int] = None) -> Optional[str]:
    """Trim and collapse whitespace; accept anything at least min_length long."""
    if min_length is None:
        min_length = settings.conversation.min_name_length
    name = collapse_whitespace(message)
    if len(name) < min_length:
        return None
    return name
