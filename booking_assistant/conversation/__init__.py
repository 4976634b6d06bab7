from booking_assistant.conversation.parsers import (
    DayChoice,
    normalize_clock_time,
    parse_day_choice,
    parse_time_choice,
    sanitize_name,
)
from booking_assistant.conversation.state_machine import (
    STATE_HANDLERS,
    ProcessResult,
    derive_start_time,
    process,
)
from booking_assistant.schemas.conversation_schema import ConversationContext, ConversationState

__all__ = [
    "process",
    "derive_start_time",
    "ProcessResult",
    "ConversationState",
    "ConversationContext",
    "STATE_HANDLERS",
    "DayChoice",
    "parse_day_choice",
    "parse_time_choice",
    "normalize_clock_time",
    "sanitize_name",
]
