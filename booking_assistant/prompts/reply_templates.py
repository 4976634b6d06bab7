"""Reply texts sent back to the customer, one builder per conversation step."""

from typing import Optional

from booking_assistant.config import settings
from booking_assistant.tools.availability import format_slots
from booking_assistant.tools.services import get_service_display_names, get_service_labels


def _service_list_inline() -> str:
    labels = get_service_labels()
    if len(labels) == 1:
        return labels[0]
    return ", ".join(labels[:-1]) + f", or {labels[-1]}"


def build_welcome_reply() -> str:
    lines = [f"Welcome to {settings.business.name}. What service would you like?"]
    lines.extend(f"- {name}" for name in get_service_display_names())
    return "\n".join(lines)


def build_service_retry_reply() -> str:
    return f"Please choose one of these services: {_service_list_inline()}."


def build_ask_day_reply() -> str:
    return "Great. What day do you prefer? (Example: tomorrow, Monday, or 2026-02-12)"


def build_day_retry_reply() -> str:
    return (
        "I couldn't read that day. Please send a weekday, 'today', 'tomorrow', "
        "or a date like 2026-02-12 or 2/12."
    )


def build_slots_reply(day_label: str, slots: dict[str, str]) -> str:
    return (
        f"Available times for {day_label}:\n{format_slots(slots)}\n"
        "Reply with a number (for example, 1) or a time (for example, 10:00 AM)."
    )


def build_time_retry_reply(slots: Optional[dict[str, str]]) -> str:
    if not slots:
        return "Please choose a valid time from the options."
    return f"Please choose a valid time from the options:\n{format_slots(slots)}"


def build_ask_name_reply() -> str:
    return "Perfect. What's your full name for the booking?"


def build_name_retry_reply() -> str:
    minimum = settings.conversation.min_name_length
    return f"Please send a valid name (at least {minimum} characters)."


def build_confirmation_reply(
    customer_name: str,
    service: Optional[str],
    day_choice: Optional[str],
    time_choice: Optional[str],
) -> str:
    return (
        f"Thanks {customer_name}. Your {service or 'service'} is booked for "
        f"{day_choice or 'your selected day'} at {time_choice or 'your selected time'}. "
        "Reply anytime to start a new booking."
    )


def build_restart_reply() -> str:
    return f"If you'd like another booking, tell me the service: {_service_list_inline()}."
