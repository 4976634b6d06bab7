"""
Inbound message handler for the messaging channel.

Loads the customer's conversation, runs one transition, persists the
result, and books the appointment once the conversation is confirmed.
Messages from the same customer are processed one at a time; different
customers run concurrently.

Usage:
    webhook = BookingWebhook(InMemoryConversationStore(), InMemoryAppointmentStore())
    response = await webhook.handle({"from": "+972501234567", "body": "hi"})
"""

import asyncio
import weakref
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import ValidationError

from booking_assistant.config import settings
from booking_assistant.conversation.state_machine import derive_start_time, process
from booking_assistant.logging_context import get_customer_logger, set_customer_id
from booking_assistant.schemas.booking_schema import (
    AppointmentRecord,
    InboundMessage,
    WebhookResponse,
)
from booking_assistant.schemas.conversation_schema import (
    ConversationContext,
    ConversationRecord,
    ConversationState,
    MessageDirection,
)
from booking_assistant.tools.booking import AppointmentStore
from booking_assistant.tools.conversations import ConversationStore, InMemoryMessageLog

logger = get_customer_logger(__name__)

DEFAULT_SERVICE = "haircut"
DEFAULT_CUSTOMER_NAME = "Guest"


class KeyedLocks:
    """
    One asyncio.Lock per key, created on first use.

    Locks are held weakly: once no task holds or waits on a key's lock it is
    dropped, so the map only tracks customers with messages in flight.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class BookingWebhook:
    """Ties the pure conversation engine to its stores."""

    def __init__(
        self,
        conversations: ConversationStore,
        appointments: AppointmentStore,
        messages: Optional[InMemoryMessageLog] = None,
        timeout_minutes: Optional[int] = None,
        reset_after_booking: Optional[bool] = None,
    ) -> None:
        self.conversations = conversations
        self.appointments = appointments
        self.messages = messages if messages is not None else InMemoryMessageLog()
        self.timeout_minutes = (
            settings.conversation.timeout_minutes if timeout_minutes is None else timeout_minutes
        )
        self.reset_after_booking = (
            settings.conversation.reset_after_booking
            if reset_after_booking is None
            else reset_after_booking
        )
        self._locks = KeyedLocks()

    @staticmethod
    def _error(error: str, details: Any = None) -> WebhookResponse:
        return WebhookResponse(ok=False, error=error, details=details)

    def _load_conversation(self, customer_id: str, now: datetime) -> ConversationRecord:
        record = self.conversations.get(customer_id)
        if record is None:
            logger.info("Starting new conversation")
            return self.conversations.put(customer_id, ConversationState.NEW, ConversationContext())

        if self.timeout_minutes > 0 and record.state != ConversationState.NEW:
            idle = now - record.updated_at
            if idle > timedelta(minutes=self.timeout_minutes):
                logger.info("Conversation idle for %s, resetting", idle)
                return self.conversations.put(
                    customer_id, ConversationState.NEW, ConversationContext()
                )
        return record

    def _book(self, customer_id: str, context: ConversationContext) -> Optional[AppointmentRecord]:
        start_time = derive_start_time(context)
        if start_time is None:
            return None
        return self.appointments.create_if_absent(
            customer_id,
            context.customer_name or DEFAULT_CUSTOMER_NAME,
            context.service or DEFAULT_SERVICE,
            start_time,
        )

    async def handle(
        self, payload: Any, now: Optional[datetime] = None
    ) -> WebhookResponse:
        """
        Process one inbound webhook payload.

        Args:
            payload: Raw JSON-decoded body with at least 'from' and 'body'.
            now: Reference time for day parsing and idle expiry. Defaults to
                the current UTC time.

        Returns:
            WebhookResponse. Invalid payloads and inconsistent conversations
            produce ok=False; store errors propagate.
        """
        if not isinstance(payload, dict):
            return self._error("Request body must be a JSON object.")
        try:
            inbound = InboundMessage.model_validate(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            return self._error(
                str(first.get("msg", "Invalid request body.")).removeprefix("Value error, "),
                details=exc.errors(include_url=False, include_context=False),
            )

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        customer_id = inbound.sender
        set_customer_id(customer_id)

        async with self._locks.get(customer_id):
            self.messages.record(
                customer_id, MessageDirection.IN, inbound.body, inbound.raw or payload
            )
            conversation = self._load_conversation(customer_id, now)
            result = process(conversation.state, conversation.context, inbound.body, now=now)
            self.conversations.put(customer_id, result.next_state, result.next_context)

            appointment = None
            if result.next_state == ConversationState.CONFIRMED:
                appointment = self._book(customer_id, result.next_context)
                if appointment is None:
                    logger.error("Reached CONFIRMED without a bookable day/time")
                    return self._error(
                        "Conversation reached CONFIRMED without valid day/time in context.",
                        details=result.next_context.to_record(),
                    )
                if self.reset_after_booking:
                    self.conversations.put(
                        customer_id, ConversationState.NEW, ConversationContext()
                    )

            self.messages.record(customer_id, MessageDirection.OUT, result.reply_text)

        return WebhookResponse(ok=True, reply_text=result.reply_text, appointment=appointment)
