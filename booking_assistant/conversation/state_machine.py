"""
Finite-state transducer driving the booking dialogue.

Given the stored state, the stored context, and one inbound message,
``process`` returns the next state, a fresh context, and the reply to send.
It performs no I/O and never raises: a message that cannot be parsed keeps
the conversation where it is, and an unrecognized state restarts the flow.

Usage:
    result = process(ConversationState.NEW, ConversationContext(), "hi")
    assert result.next_state == ConversationState.AWAITING_SERVICE
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from booking_assistant.conversation.parsers import (
    ReferenceTime,
    parse_day_choice,
    parse_time_choice,
    sanitize_name,
)
from booking_assistant.logging_context import get_customer_logger
from booking_assistant.prompts import reply_templates
from booking_assistant.schemas.conversation_schema import ConversationContext, ConversationState
from booking_assistant.tools.availability import slots_for
from booking_assistant.tools.services import match_service

logger = get_customer_logger(__name__)

_STRICT_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_STRICT_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one transition."""

    next_state: ConversationState
    next_context: ConversationContext
    reply_text: str


Handler = Callable[[ConversationContext, str, Optional[ReferenceTime]], ProcessResult]


def _handle_new(context: ConversationContext, message: str, now: Optional[ReferenceTime]) -> ProcessResult:
    return ProcessResult(
        ConversationState.AWAITING_SERVICE, context, reply_templates.build_welcome_reply()
    )


def _handle_awaiting_service(
    context: ConversationContext, message: str, now: Optional[ReferenceTime]
) -> ProcessResult:
    service = match_service(message)
    if service is None:
        return ProcessResult(
            ConversationState.AWAITING_SERVICE, context, reply_templates.build_service_retry_reply()
        )

    # A new service invalidates every choice made after it.
    next_context = context.model_copy(update={
        "service": service,
        "day_choice": None,
        "day_label": None,
        "time_choice": None,
        "available_slots": None,
    })
    return ProcessResult(
        ConversationState.AWAITING_DAY, next_context, reply_templates.build_ask_day_reply()
    )


def _handle_awaiting_day(
    context: ConversationContext, message: str, now: Optional[ReferenceTime]
) -> ProcessResult:
    choice = parse_day_choice(message, now=now)
    if choice is None:
        return ProcessResult(
            ConversationState.AWAITING_DAY, context, reply_templates.build_day_retry_reply()
        )

    slots = slots_for(choice.iso_date)
    next_context = context.model_copy(update={
        "day_choice": choice.iso_date,
        "day_label": choice.label,
        "time_choice": None,
        "available_slots": slots,
    })
    return ProcessResult(
        ConversationState.AWAITING_TIME,
        next_context,
        reply_templates.build_slots_reply(choice.label, slots),
    )


def _handle_awaiting_time(
    context: ConversationContext, message: str, now: Optional[ReferenceTime]
) -> ProcessResult:
    selected = parse_time_choice(message, context.available_slots)
    if selected is None:
        return ProcessResult(
            ConversationState.AWAITING_TIME,
            context,
            reply_templates.build_time_retry_reply(context.available_slots),
        )

    next_context = context.model_copy(update={"time_choice": selected})
    return ProcessResult(
        ConversationState.AWAITING_NAME, next_context, reply_templates.build_ask_name_reply()
    )


def _handle_awaiting_name(
    context: ConversationContext, message: str, now: Optional[ReferenceTime]
) -> ProcessResult:
    name = sanitize_name(message)
    if name is None:
        return ProcessResult(
            ConversationState.AWAITING_NAME, context, reply_templates.build_name_retry_reply()
        )

    next_context = context.model_copy(update={"customer_name": name})
    reply = reply_templates.build_confirmation_reply(
        next_context.customer_name,
        next_context.service,
        next_context.day_choice,
        next_context.time_choice,
    )
    return ProcessResult(ConversationState.CONFIRMED, next_context, reply)


def _handle_restart(context: ConversationContext, message: str, now: Optional[ReferenceTime]) -> ProcessResult:
    return ProcessResult(
        ConversationState.AWAITING_SERVICE, ConversationContext(), reply_templates.build_restart_reply()
    )


STATE_HANDLERS: dict[ConversationState, Handler] = {
    ConversationState.NEW: _handle_new,
    ConversationState.AWAITING_SERVICE: _handle_awaiting_service,
    ConversationState.AWAITING_DAY: _handle_awaiting_day,
    ConversationState.AWAITING_TIME: _handle_awaiting_time,
    ConversationState.AWAITING_NAME: _handle_awaiting_name,
    ConversationState.CONFIRMED: _handle_restart,
}

_unhandled = set(ConversationState) - set(STATE_HANDLERS)
if _unhandled:
    raise RuntimeError(f"States without a handler: {sorted(s.value for s in _unhandled)}")


def coerce_state(value: Union[ConversationState, str, None]) -> Optional[ConversationState]:
    """Map a stored state value to a ConversationState, or None if unrecognized."""
    if isinstance(value, ConversationState):
        return value
    try:
        return ConversationState(value)
    except ValueError:
        return None


def process(
    state: Union[ConversationState, str],
    context: Union[ConversationContext, Mapping[str, Any], None],
    message: str,
    now: Optional[ReferenceTime] = None,
) -> ProcessResult:
    """
    Advance a conversation by one inbound message.

    Args:
        state: Stored state. Unrecognized values restart the flow.
        context: Stored context, as a model or its serialized record.
        message: Raw customer text.
        now: Reference point for 'today'/'tomorrow'/weekday parsing.

    Returns:
        ProcessResult with the next state, a replacement context, and a
        non-empty reply.
    """
    if not isinstance(context, ConversationContext):
        context = ConversationContext.from_record(context)
    message = message if isinstance(message, str) else ""

    current = coerce_state(state)
    if current is None:
        logger.warning("Unrecognized conversation state %r, restarting flow", state)
        handler = _handle_restart
    else:
        handler = STATE_HANDLERS[current]

    result = handler(context, message.strip(), now)
    logger.debug(
        "State transition: %s -> %s",
        current.value if current else state, result.next_state.value,
    )
    return result


def derive_start_time(
    context: Union[ConversationContext, Mapping[str, Any], None],
) -> Optional[datetime]:
    """
    Combine dayChoice and timeChoice into a UTC start instant.

    Both fields are re-validated ('YYYY-MM-DD' and 'HH:MM'); None means the
    context is not bookable.
    """
    if not isinstance(context, ConversationContext):
        context = ConversationContext.from_record(context)
    if not context.day_choice or not context.time_choice:
        return None

    day_match = _STRICT_DATE_RE.match(context.day_choice)
    time_match = _STRICT_TIME_RE.match(context.time_choice)
    if not day_match or not time_match:
        return None

    year, month, day = (int(part) for part in day_match.groups())
    hour, minute = (int(part) for part in time_match.groups())
    try:
        return datetime(year, month, day, hour, minute, 0, tzinfo=timezone.utc)
    except ValueError:
        return None
