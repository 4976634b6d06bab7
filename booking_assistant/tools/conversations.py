"""
Mock conversation store and message log.

In production, these would be database tables holding one conversation row
per customer (state + context) and every inbound/outbound message.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from booking_assistant.schemas.conversation_schema import (
    ConversationContext,
    ConversationRecord,
    ConversationState,
    MessageDirection,
    MessageRecord,
)

logger = logging.getLogger(__name__)


class ConversationStore(Protocol):
    """What the inbound handler needs from a conversation backend."""

    def get(self, customer_id: str) -> Optional[ConversationRecord]:
        ...

    def put(
        self, customer_id: str, state: ConversationState, context: ConversationContext
    ) -> ConversationRecord:
        ...


class InMemoryConversationStore:
    """Dict-backed conversation store keyed by customer id."""

    def __init__(self) -> None:
        self._records: dict[str, ConversationRecord] = {}

    def get(self, customer_id: str) -> Optional[ConversationRecord]:
        return self._records.get(customer_id)

    def put(
        self, customer_id: str, state: ConversationState, context: ConversationContext
    ) -> ConversationRecord:
        record = ConversationRecord(
            customer_id=customer_id,
            state=state,
            context=context,
            updated_at=datetime.now(timezone.utc),
        )
        self._records[customer_id] = record
        logger.debug("Conversation %s stored in state %s", customer_id, state.value)
        return record

    def reset(self) -> None:
        """Clear all conversations. Used by test fixtures for isolation."""
        self._records.clear()


class InMemoryMessageLog:
    """Append-only log of inbound and outbound messages."""

    def __init__(self) -> None:
        self._messages: list[MessageRecord] = []

    def record(
        self,
        customer_id: str,
        direction: MessageDirection,
        body: Optional[str],
        raw_payload: Optional[dict[str, Any]] = None,
    ) -> MessageRecord:
        message = MessageRecord(
            id=uuid.uuid4().hex,
            customer_id=customer_id,
            direction=direction,
            body=body,
            raw_payload=raw_payload,
            created_at=datetime.now(timezone.utc),
        )
        self._messages.append(message)
        return message

    def for_customer(self, customer_id: str) -> list[MessageRecord]:
        """Return a customer's messages in arrival order."""
        return [m for m in self._messages if m.customer_id == customer_id]

    def reset(self) -> None:
        self._messages.clear()
