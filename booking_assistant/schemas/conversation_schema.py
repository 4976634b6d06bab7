"""Conversation context and stored record schemas."""

import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """Position of a customer in the booking dialogue."""

    NEW = "NEW"
    AWAITING_SERVICE = "AWAITING_SERVICE"
    AWAITING_DAY = "AWAITING_DAY"
    AWAITING_TIME = "AWAITING_TIME"
    AWAITING_NAME = "AWAITING_NAME"
    CONFIRMED = "CONFIRMED"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ConversationState"]:
        # Records written by the earlier deployment use WAIT_* names.
        if isinstance(value, str) and value.startswith("WAIT_"):
            return cls.__members__.get("AWAITING_" + value[len("WAIT_"):])
        return None


class ConversationContext(BaseModel):
    """
    Booking fields gathered so far. Immutable; transitions build a new one.

    Serialized with camelCase keys (dayChoice, timeChoice, ...) and absent
    fields omitted, which is the shape the conversation store persists.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    service: Optional[str] = None
    day_choice: Optional[str] = None
    day_label: Optional[str] = None
    time_choice: Optional[str] = None
    customer_name: Optional[str] = None
    available_slots: Optional[dict[str, str]] = None

    def to_record(self) -> dict[str, Any]:
        """Export as a JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: Any) -> "ConversationContext":
        """Load a stored context; malformed records become an empty context."""
        if not record:
            return cls()
        if not isinstance(record, Mapping):
            logger.warning(
                "Discarding conversation context of type %s", type(record).__name__
            )
            return cls()
        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            logger.warning(
                "Discarding malformed conversation context (%d errors)", exc.error_count()
            )
            return cls()

    def is_empty(self) -> bool:
        return not self.to_record()


class ConversationRecord(BaseModel):
    """Stored conversation row: one per customer."""

    customer_id: str
    state: ConversationState = ConversationState.NEW
    context: ConversationContext = Field(default_factory=ConversationContext)
    updated_at: datetime


class MessageDirection(str, Enum):
    IN = "IN"
    OUT = "OUT"


class MessageRecord(BaseModel):
    """A single inbound or outbound message kept in the message log."""

    id: str
    customer_id: str
    direction: MessageDirection
    body: Optional[str] = None
    raw_payload: Optional[dict[str, Any]] = None
    created_at: datetime
