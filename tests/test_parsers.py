"""Tests for the day, time, and name parsers."""

from datetime import date, datetime

import pytest

from booking_assistant.conversation.parsers import (
    DayChoice,
    format_day_label,
    normalize_clock_time,
    parse_day_choice,
    parse_time_choice,
    sanitize_name,
)


class TestDayKeywords:
    def test_today(self, today):
        assert parse_day_choice("today please", now=today).iso_date == "2026-02-09"

    def test_tomorrow(self, today):
        assert parse_day_choice("Tomorrow!", now=today).iso_date == "2026-02-10"

    def test_today_is_a_whole_word(self, today):
        assert parse_day_choice("todayish", now=today) is None

    def test_accepts_datetime_reference(self):
        choice = parse_day_choice("tomorrow", now=datetime(2026, 12, 31, 23, 30))
        assert choice.iso_date == "2027-01-01"

    def test_label_is_weekday_month_day(self, today):
        choice = parse_day_choice("2026-02-12", now=today)
        assert choice == DayChoice(iso_date="2026-02-12", label="Thursday, Feb 12")


class TestExplicitDates:
    def test_iso_date_embedded_in_text(self, today):
        assert parse_day_choice("can I come on 2026-03-01?", now=today).iso_date == "2026-03-01"

    def test_iso_date_outranks_keywords(self, today):
        choice = parse_day_choice("today or tomorrow, let's say 2025-01-01", now=today)
        assert choice.iso_date == "2025-01-01"

    def test_invalid_iso_date_rejected(self, today):
        assert parse_day_choice("2024-02-30", now=today) is None

    @pytest.mark.parametrize("text", ["2025-02-29", "2025-1-5", "2025-02-29 tomorrow"])
    def test_invalid_iso_date_not_reread_as_month_day(self, text):
        assert parse_day_choice(text, now=date(2028, 3, 1)) is None

    def test_keyword_outranks_numeric_range(self, today):
        choice = parse_day_choice("tomorrow between 10-12 works", now=today)
        assert choice == DayChoice(iso_date="2026-02-10", label="Tuesday, Feb 10")

    def test_today_outranks_slash_date(self, today):
        assert parse_day_choice("today, not 3/4", now=today).iso_date == "2026-02-09"

    def test_leap_day_accepted(self, today):
        assert parse_day_choice("2024-02-29", now=today).iso_date == "2024-02-29"

    def test_slash_date_uses_reference_year(self, today):
        assert parse_day_choice("3/4", now=today).iso_date == "2026-03-04"

    def test_dash_date_without_year(self, today):
        assert parse_day_choice("on 12-25", now=today).iso_date == "2026-12-25"

    def test_two_digit_year(self, today):
        assert parse_day_choice("2/29/24", now=today).iso_date == "2024-02-29"

    def test_four_digit_year(self, today):
        assert parse_day_choice("12/25/2027", now=today).iso_date == "2027-12-25"

    def test_invalid_slash_date_rejected(self, today):
        assert parse_day_choice("2/30", now=today) is None

    def test_slash_date_outranks_weekday(self, today):
        assert parse_day_choice("friday 3/6", now=today).iso_date == "2026-03-06"


class TestWeekdays:
    def test_same_weekday_is_today(self, today):
        assert parse_day_choice("monday", now=today).iso_date == "2026-02-09"

    def test_later_this_week(self, today):
        assert parse_day_choice("friday", now=today).iso_date == "2026-02-13"

    def test_wraps_to_next_week(self):
        # Thursday reference; Tuesday is five days on.
        assert parse_day_choice("tuesday", now=date(2026, 2, 12)).iso_date == "2026-02-17"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("tue", "2026-02-10"),
            ("tues", "2026-02-10"),
            ("wed", "2026-02-11"),
            ("thurs", "2026-02-12"),
            ("sat", "2026-02-14"),
            ("sun", "2026-02-15"),
        ],
    )
    def test_abbreviations(self, today, text, expected):
        assert parse_day_choice(f"how about {text}", now=today).iso_date == expected

    def test_unknown_day(self, today):
        assert parse_day_choice("someday soon", now=today) is None

    def test_empty_message(self, today):
        assert parse_day_choice("", now=today) is None


class TestClockTime:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("12am", "00:00"),
            ("12pm", "12:00"),
            ("13:00", "13:00"),
            ("2pm", "14:00"),
            ("2:30 PM", "14:30"),
            ("9", "09:00"),
            ("10:00 AM", "10:00"),
            ("0:15", "00:15"),
        ],
    )
    def test_valid_times(self, text, expected):
        assert normalize_clock_time(text) == expected

    @pytest.mark.parametrize("text", ["13pm", "0am", "24:00", "9:60", "noon", ""])
    def test_invalid_times(self, text):
        assert normalize_clock_time(text) is None


class TestTimeChoice:
    SLOTS = {"1": "10:00", "2": "12:30", "3": "14:00"}

    def test_option_number(self):
        assert parse_time_choice("2", self.SLOTS) == "12:30"

    def test_option_word(self):
        assert parse_time_choice("Option 3", self.SLOTS) == "14:00"

    def test_option_inside_sentence(self):
        assert parse_time_choice("I'll take option 1 thanks", self.SLOTS) == "10:00"

    def test_unknown_option_number(self):
        assert parse_time_choice("9", self.SLOTS) is None

    def test_twelve_hour_time(self):
        assert parse_time_choice("2pm", self.SLOTS) == "14:00"

    def test_twenty_four_hour_time(self):
        assert parse_time_choice("at 12:30 please", self.SLOTS) == "12:30"

    def test_time_not_offered(self):
        assert parse_time_choice("3:15pm", self.SLOTS) is None

    def test_unparseable(self):
        assert parse_time_choice("whenever", self.SLOTS) is None

    def test_no_slots_offered(self):
        assert parse_time_choice("1", None) is None
        assert parse_time_choice("1", {}) is None


class TestSanitizeName:
    def test_collapses_whitespace(self):
        assert sanitize_name("  Dana   Levi ") == "Dana Levi"

    def test_keeps_case(self):
        assert sanitize_name("dana levi") == "dana levi"

    def test_too_short(self):
        assert sanitize_name("D") is None

    def test_blank(self):
        assert sanitize_name("   ") is None

    def test_non_latin_names_accepted(self):
        assert sanitize_name("李雷") == "李雷"

    def test_custom_minimum(self):
        assert sanitize_name("Noa", min_length=4) is None


class TestFormatDayLabel:
    def test_format(self):
        assert format_day_label(date(2026, 1, 1)) == "Thursday, Jan 1"
