"""Shared test fixtures and helpers."""

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from booking_assistant.conversation.state_machine import ProcessResult, process
from booking_assistant.schemas.conversation_schema import ConversationContext, ConversationState
from booking_assistant.tools.booking import InMemoryAppointmentStore
from booking_assistant.tools.conversations import InMemoryConversationStore, InMemoryMessageLog
from booking_assistant.webhook import BookingWebhook

# A Monday. Tomorrow (2026-02-10) offers 3 slots starting at 10:30.
REFERENCE_DAY = date(2026, 2, 9)
REFERENCE_NOW = datetime(2026, 2, 9, 8, 0, tzinfo=timezone.utc)
CUSTOMER = "+972501234567"


@pytest.fixture
def today():
    return REFERENCE_DAY


@pytest.fixture
def now():
    return REFERENCE_NOW


@pytest.fixture
def conversation_store():
    return InMemoryConversationStore()


@pytest.fixture
def appointment_store():
    return InMemoryAppointmentStore()


@pytest.fixture
def message_log():
    return InMemoryMessageLog()


@pytest.fixture
def webhook(conversation_store, appointment_store, message_log):
    return BookingWebhook(
        conversation_store,
        appointment_store,
        messages=message_log,
        timeout_minutes=0,
        reset_after_booking=True,
    )


def run_conversation(
    messages: list[str],
    state: ConversationState = ConversationState.NEW,
    context: Optional[ConversationContext] = None,
    now=REFERENCE_DAY,
) -> ProcessResult:
    """Feed messages through process() and return the last result."""
    context = context or ConversationContext()
    result = None
    for message in messages:
        result = process(state, context, message, now=now)
        state, context = result.next_state, result.next_context
    assert result is not None
    return result


def inbound(body: str, sender: str = CUSTOMER) -> dict:
    """Helper to build a webhook payload."""
    return {"from": sender, "body": body}
