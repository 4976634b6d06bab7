"""
Mock slot availability.

Offered times are derived from the chosen date alone, not from existing
bookings. In production, this would query the shop's calendar for free
chairs on that day.
"""

import logging
import re

logger = logging.getLogger(__name__)

SLOT_TEMPLATES: list[list[str]] = [
    ["10:00", "12:30", "14:00", "16:30"],
    ["09:30", "11:00", "13:30", "15:00"],
    ["10:30", "12:00", "14:30", "17:00"],
    ["09:00", "11:30", "14:00", "18:00"],
]

MIN_SLOTS_OFFERED = 3


def _date_seed(iso_date: str) -> int:
    """Integer formed by the date's digits; 0 when there are none."""
    digits = re.sub(r"\D", "", iso_date)
    return int(digits) if digits else 0


def slots_for(iso_date: str) -> dict[str, str]:
    """
    Offer numbered time slots for a date.

    Same date string, same slots: the template and count depend only on
    the seed derived from the date's digits.
    """
    seed = _date_seed(iso_date)
    template = SLOT_TEMPLATES[seed % len(SLOT_TEMPLATES)]
    count = MIN_SLOTS_OFFERED + seed % 2
    slots = {str(index): time for index, time in enumerate(template[:count], start=1)}
    logger.debug("Generated %d slots for %s", len(slots), iso_date)
    return slots


def format_slots(slots: dict[str, str]) -> str:
    """Render slots as '<key>. <time>' lines in ascending key order."""
    ordered = sorted(slots.items(), key=lambda item: _option_sort_key(item[0]))
    return "\n".join(f"{key}. {time}" for key, time in ordered)


def _option_sort_key(key: str) -> tuple[int, str]:
    return (int(key), key) if key.isdigit() else (10**9, key)
