"""Service catalog and free-text service matching."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from booking_assistant.utils import normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServicePattern:
    """A canonical service label and the phrases that select it."""

    label: str
    display_name: str
    patterns: tuple[re.Pattern, ...]


def _phrases(*phrases: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(rf"\b{p}\b", re.IGNORECASE) for p in phrases)


# Evaluated in order; the first entry with a matching pattern wins.
SERVICE_PATTERNS: list[ServicePattern] = [
    ServicePattern(
        label="haircut",
        display_name="Haircut",
        patterns=_phrases(r"hair\s?cut", r"cut", r"trim hair"),
    ),
    ServicePattern(
        label="beard trim",
        display_name="Beard trim",
        patterns=_phrases(r"beard", r"beard trim", r"shave"),
    ),
    ServicePattern(
        label="color",
        display_name="Color",
        patterns=_phrases(r"color", r"colour", r"dye"),
    ),
]


def get_service_labels() -> list[str]:
    """Return canonical service labels in table order."""
    return [entry.label for entry in SERVICE_PATTERNS]


def get_service_display_names() -> list[str]:
    """Return human-facing service names in table order."""
    return [entry.display_name for entry in SERVICE_PATTERNS]


def match_service(query: str) -> Optional[str]:
    """Match a message to a canonical service label. Returns None if no match."""
    normalized = normalize_text(query)
    for entry in SERVICE_PATTERNS:
        if any(pattern.search(normalized) for pattern in entry.patterns):
            logger.debug("Service matched: '%s' -> %s", normalized, entry.label)
            return entry.label
    return None
