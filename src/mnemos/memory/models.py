"""Data models for the memory system."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any

# Fraction of seconds, any length; padded or cut to microseconds
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _normalize_fraction(match: re.Match) -> str:
    digits = match.group(2)[:6].ljust(6, "0")
    return f"{match.group(1)}.{digits}"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp from the knowledge service.

    Accepts a trailing ``Z``. Naive values are taken as UTC.
    Returns None for anything that cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(_normalize_fraction, text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    return _as_utc(parsed)


def _parse_rating(value: Any) -> float | None:
    # bool is an int subclass; a JSON true is not a rating
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    rating = float(value)
    if math.isnan(rating):
        return None
    return rating


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Fact:
    """A proposition extracted from earlier turns by the knowledge service.

    Attributes:
        id: Opaque identifier assigned by the service (wire: ``uuid``).
        text: The natural-language proposition (wire: ``fact``).
        rating: Relevance score, higher is more relevant. None if unrated.
        created_at: When the service recorded the fact.
        source_entity: Subject entity name (wire: ``source_node_name``).
        target_entity: Object entity name (wire: ``target_node_name``).
        valid_from: Start of the validity window (wire: ``valid_at``).
        invalid_at: When the fact stopped being true.
        expired_at: When the service retired the fact.
    """

    id: str | None = None
    text: str | None = None
    rating: float | None = None
    created_at: datetime | None = None
    source_entity: str | None = None
    target_entity: str | None = None
    valid_from: datetime | None = None
    invalid_at: datetime | None = None
    expired_at: datetime | None = None

    def __post_init__(self) -> None:
        # Naive timestamps are taken as UTC
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime) and value.tzinfo is None:
                object.__setattr__(self, f.name, _as_utc(value))

    @property
    def has_text(self) -> bool:
        """True if the fact carries a non-blank proposition."""
        return isinstance(self.text, str) and bool(self.text.strip())

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if ``expired_at`` is set and not after ``now``."""
        if self.expired_at is None:
            return False
        now = datetime.now(timezone.utc) if now is None else _as_utc(now)
        return self.expired_at <= now

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fact":
        """Build a Fact from one ``relevant_facts`` entry of the memory API."""
        return cls(
            id=_optional_str(data.get("uuid")),
            text=data.get("fact") if isinstance(data.get("fact"), str) else None,
            rating=_parse_rating(data.get("rating")),
            created_at=parse_timestamp(data.get("created_at")),
            source_entity=_optional_str(data.get("source_node_name")),
            target_entity=_optional_str(data.get("target_node_name")),
            valid_from=parse_timestamp(data.get("valid_at")),
            invalid_at=parse_timestamp(data.get("invalid_at")),
            expired_at=parse_timestamp(data.get("expired_at")),
        )
