"""Selection and ordering of facts before they reach the prompt."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from .models import Fact

DEFAULT_MAX_FACTS = 5
DEFAULT_MIN_RATING = 0.3


def is_eligible(fact: Fact, min_rating: float, now: datetime) -> bool:
    """Check whether a fact may be shown to the model.

    Unrated facts are kept. Rated facts must score strictly above
    ``min_rating``. Facts without text or past their ``expired_at`` are
    dropped. ``valid_from`` and ``invalid_at`` are not consulted.
    """
    if not fact.has_text:
        return False
    if fact.rating is not None and fact.rating <= min_rating:
        return False
    return not fact.is_expired(now)


def _sort_key(fact: Fact) -> float:
    return fact.rating if fact.rating is not None else 0.0


def rank_facts(
    facts: Iterable[Fact],
    max_count: int = DEFAULT_MAX_FACTS,
    min_rating: float = DEFAULT_MIN_RATING,
    now: datetime | None = None,
) -> list[Fact]:
    """Filter, order and truncate facts for context fusion.

    Ordering is by rating, highest first, with unrated facts compared as 0.
    The sort is stable, so equal ratings keep their input order.

    Args:
        facts: Facts as received from the knowledge service.
        max_count: Maximum number of facts to return.
        min_rating: Rated facts at or below this score are dropped.
        now: Reference time for expiry checks. Defaults to current UTC time.

    Returns:
        A new list with at most ``max_count`` facts.
    """
    if max_count <= 0:
        return []

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    kept = [fact for fact in facts if is_eligible(fact, min_rating, now)]
    # sorted() stays stable with reverse=True
    kept = sorted(kept, key=_sort_key, reverse=True)
    return kept[:max_count]
