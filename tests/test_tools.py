"""Tests for the service catalog, slot generator, and in-memory stores."""

from datetime import datetime, timezone

import pytest

from booking_assistant.schemas.booking_schema import AppointmentStatus
from booking_assistant.schemas.conversation_schema import (
    ConversationContext,
    ConversationState,
    MessageDirection,
)
from booking_assistant.tools.availability import SLOT_TEMPLATES, format_slots, slots_for
from booking_assistant.tools.services import get_service_labels, match_service


class TestMatchService:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("I want a HAIRCUT", "haircut"),
            ("hair cut please", "haircut"),
            ("just a cut", "haircut"),
            ("beard trim", "beard trim"),
            ("a  clean   SHAVE", "beard trim"),
            ("colour", "color"),
            ("can you dye my hair", "color"),
        ],
    )
    def test_matches(self, text, expected):
        assert match_service(text) == expected

    def test_table_order_breaks_ties(self):
        assert match_service("shave and a cut") == "haircut"

    def test_word_boundaries(self):
        assert match_service("cutlery") is None

    def test_no_match(self):
        assert match_service("massage") is None
        assert match_service("") is None

    def test_labels_in_table_order(self):
        assert get_service_labels() == ["haircut", "beard trim", "color"]


class TestSlotsFor:
    def test_same_date_same_slots(self):
        first = slots_for("2026-02-10")
        slots_for("2031-07-04")
        assert slots_for("2026-02-10") == first

    def test_three_slots_for_even_seed(self):
        assert slots_for("2026-02-10") == {"1": "10:30", "2": "12:00", "3": "14:30"}

    def test_four_slots_for_odd_seed(self):
        assert slots_for("2026-02-09") == {
            "1": "09:30", "2": "11:00", "3": "13:30", "4": "15:00",
        }

    def test_template_selected_by_seed(self):
        assert slots_for("2026-02-12") == {"1": "10:00", "2": "12:30", "3": "14:00"}

    def test_keys_are_ordered_from_one(self):
        assert list(slots_for("2026-02-11")) == ["1", "2", "3", "4"]

    def test_non_numeric_date_seeds_zero(self):
        assert slots_for("not-a-date") == dict(zip(["1", "2", "3"], SLOT_TEMPLATES[0]))


class TestFormatSlots:
    def test_ascending_numeric_key_order(self):
        slots = {"10": "18:00", "2": "11:00", "1": "09:00"}
        assert format_slots(slots) == "1. 09:00\n2. 11:00\n10. 18:00"


class TestAppointmentStore:
    START = datetime(2026, 2, 10, 10, 30, tzinfo=timezone.utc)

    def test_create(self, appointment_store):
        appt = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        assert appt.id.startswith("AP-")
        assert appt.status == AppointmentStatus.PENDING
        assert appointment_store.get(appt.id) == appt

    def test_create_is_idempotent(self, appointment_store):
        first = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        second = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        assert first.id == second.id
        assert len(appointment_store.list_appointments()) == 1

    def test_different_service_is_a_new_booking(self, appointment_store):
        first = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        second = appointment_store.create_if_absent("+15555550100", "Dana", "color", self.START)
        assert first.id != second.id

    def test_canceled_slot_can_be_rebooked(self, appointment_store):
        first = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        appointment_store.cancel(first.id)
        second = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        assert second.id != first.id
        assert appointment_store.get(first.id).status == AppointmentStatus.CANCELED

    def test_confirm(self, appointment_store):
        appt = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        confirmed = appointment_store.confirm(f" {appt.id} ")
        assert confirmed.status == AppointmentStatus.CONFIRMED
        assert appointment_store.get(appt.id).status == AppointmentStatus.CONFIRMED

    def test_confirm_unknown(self, appointment_store):
        assert appointment_store.confirm("AP-MISSING") is None

    def test_list_by_day(self, appointment_store):
        late = appointment_store.create_if_absent(
            "+15555550100", "Dana", "color", datetime(2026, 2, 10, 17, 0, tzinfo=timezone.utc)
        )
        early = appointment_store.create_if_absent("+15555550101", "Noa", "haircut", self.START)
        appointment_store.create_if_absent(
            "+15555550102", "Avi", "haircut", datetime(2026, 2, 11, 9, 0, tzinfo=timezone.utc)
        )
        assert [a.id for a in appointment_store.list_appointments("2026-02-10")] == [
            early.id, late.id,
        ]

    def test_list_all_newest_first(self, appointment_store):
        a = appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        b = appointment_store.create_if_absent(
            "+15555550100", "Dana", "haircut", datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        )
        assert [x.id for x in appointment_store.list_appointments()] == [b.id, a.id]

    def test_list_rejects_bad_date(self, appointment_store):
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            appointment_store.list_appointments("10/02/2026")

    def test_reset(self, appointment_store):
        appointment_store.create_if_absent("+15555550100", "Dana", "haircut", self.START)
        appointment_store.reset()
        assert appointment_store.list_appointments() == []


class TestConversationStore:
    def test_missing(self, conversation_store):
        assert conversation_store.get("+15555550100") is None

    def test_put_and_get(self, conversation_store):
        ctx = ConversationContext(service="haircut")
        conversation_store.put("+15555550100", ConversationState.AWAITING_DAY, ctx)
        record = conversation_store.get("+15555550100")
        assert record.state == ConversationState.AWAITING_DAY
        assert record.context == ctx
        assert record.updated_at.tzinfo is not None


class TestMessageLog:
    def test_records_in_order(self, message_log):
        message_log.record("+15555550100", MessageDirection.IN, "hi", {"from": "+15555550100"})
        message_log.record("+15555550199", MessageDirection.IN, "hello")
        message_log.record("+15555550100", MessageDirection.OUT, "Welcome")
        messages = message_log.for_customer("+15555550100")
        assert [m.direction for m in messages] == [MessageDirection.IN, MessageDirection.OUT]
        assert messages[0].raw_payload == {"from": "+15555550100"}
