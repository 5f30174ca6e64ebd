"""Memory module: retrieval, ranking and fusion of extracted facts."""

from .client import FactStoreClient
from .fuser import FACTS_HEADER, format_facts_block, fuse_context
from .manager import MemoryManager
from .models import Fact, parse_timestamp
from .ranker import DEFAULT_MAX_FACTS, DEFAULT_MIN_RATING, rank_facts

__all__ = [
    "DEFAULT_MAX_FACTS",
    "DEFAULT_MIN_RATING",
    "FACTS_HEADER",
    "Fact",
    "FactStoreClient",
    "MemoryManager",
    "format_facts_block",
    "fuse_context",
    "parse_timestamp",
    "rank_facts",
]
