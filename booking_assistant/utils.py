"""Shared normalization helpers used by the parsers and the inbound handler."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_E164_RE = re.compile(r"^\+[1-9]\d{7,14}$")


def collapse_whitespace(value: str) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    return _WHITESPACE_RE.sub(" ", value.strip())


def normalize_text(value: str) -> str:
    """Normalize a message for matching: trimmed, lowercased, single-spaced.

    Examples:
        >>> normalize_text("  Beard   TRIM please ")
        'beard trim please'
    """
    return collapse_whitespace(value).lower()


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("+972 (50) 123-4567")
        '+972501234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def is_valid_e164(value: str) -> bool:
    """Check that a phone number is in E.164 form: + and 8-15 digits."""
    return bool(_E164_RE.match(value))
