"""Appointment records and inbound webhook payload models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booking_assistant.config import settings
from booking_assistant.utils import is_valid_e164, normalize_phone


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"


class AppointmentRecord(BaseModel):
    """Booked appointment as kept by the appointment store."""

    id: str
    customer_id: str
    customer_name: str
    service: str
    start_time: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: datetime


class InboundMessage(BaseModel):
    """Validated inbound message from the messaging channel."""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from")
    body: str
    timestamp: Optional[str] = None
    provider: Optional[str] = None
    raw: Optional[dict[str, Any]] = None

    @field_validator("sender")
    @classmethod
    def _check_sender(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("'from' is required and must be a non-empty string.")
        if value.startswith("+"):
            value = normalize_phone(value)
        if not is_valid_e164(value):
            raise ValueError("'from' must be a valid E.164 phone number.")
        return value

    @field_validator("body")
    @classmethod
    def _check_body(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("'body' is required and must be a non-empty string.")
        limit = settings.conversation.max_message_length
        if len(value) > limit:
            raise ValueError(f"'body' must be at most {limit} characters.")
        return value


class WebhookResponse(BaseModel):
    """Result returned to the messaging channel for one inbound message."""

    ok: bool
    reply_text: Optional[str] = None
    appointment: Optional[AppointmentRecord] = None
    error: Optional[str] = None
    details: Optional[Any] = None
