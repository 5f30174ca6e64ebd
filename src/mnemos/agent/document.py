"""Document agent: collects profile fields needed to fill a document template.

The profile store is a deferred collaborator. The agent can be built
before the store exists; until ``attach("persistence", store)`` is called,
every turn is answered with a NOT_READY reply.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..logging import ErrorReporter, get_logger
from .base import Agent, AgentReply, ReplyStatus, Turn

if TYPE_CHECKING:
    from ..storage import ProfileStore

logger = logging.getLogger(__name__)

AGENT_TYPE = "document_processor"

DEFAULT_REQUIRED_FIELDS = ["full_name", "email", "address"]

_FIELD_LINE = re.compile(r"^\s*([A-Za-z][\w .-]*?)\s*[:=]\s*(.+?)\s*$")


def normalize_field(name: str) -> str:
    """Normalize a field label: lowercase, spaces and dashes to underscores."""
    return re.sub(r"[\s.-]+", "_", name.strip().lower())


class CollectionStatus(Enum):
    """Progress of a session's data collection."""

    IDLE = "idle"
    COLLECTING = "collecting"
    COMPLETE = "complete"


@dataclass
class DocumentSession:
    """Per-session collection state."""

    status: CollectionStatus = CollectionStatus.IDLE
    current_field: str | None = None
    collected: dict[str, Any] = field(default_factory=dict)


class DocumentAgent(Agent):
    """Collects required fields turn by turn and persists them per user.

    Session state is kept only while collection is in progress.
    """

    def __init__(
        self,
        flow_id: str,
        required_fields: list[str] | None = None,
        persistence: ProfileStore | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        super().__init__(flow_id)
        fields_ = required_fields if required_fields is not None else DEFAULT_REQUIRED_FIELDS
        self.required_fields = [normalize_field(f) for f in fields_]
        self._persistence = self._add_slot("persistence", persistence)
        self._reporter = reporter
        self.sessions: dict[str, DocumentSession] = {}

        if persistence is None:
            logger.warning(
                "%s built without persistence for flow %s; attach it before use",
                AGENT_TYPE,
                flow_id,
            )

    @property
    def agent_type(self) -> str:
        return AGENT_TYPE

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter or get_logger()

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        """Return the stored profile, or None if not ready or absent."""
        store = self._persistence.get()
        if store is None:
            logger.warning("get_profile called before persistence was attached")
            return None
        return store.get_profile(user_id)

    def _parse_fields(self, message: str) -> dict[str, str]:
        """Extract ``field: value`` pairs for known fields."""
        values: dict[str, str] = {}
        for line in message.splitlines():
            match = _FIELD_LINE.match(line)
            if not match:
                continue
            name = normalize_field(match.group(1))
            if name in self.required_fields:
                values[name] = match.group(2)
        return values

    def _next_missing(self, data: dict[str, Any]) -> str | None:
        for name in self.required_fields:
            if not data.get(name):
                return name
        return None

    async def process_turn(self, turn: Turn) -> AgentReply:
        """Record any supplied fields and ask for the next missing one."""
        store = self._persistence.get()
        if store is None:
            return AgentReply.not_ready(self.missing_collaborators())

        session = self.sessions.setdefault(turn.session_id, DocumentSession())

        try:
            profile = store.get_profile(turn.user_id) or {}
            updates = self._parse_fields(turn.message)

            # A bare answer fills the field we asked about last
            if not updates and session.current_field and turn.message.strip():
                updates[session.current_field] = turn.message.strip()

            if updates:
                profile.update(updates)
                store.save_profile(turn.user_id, profile)
        except (sqlite3.Error, ValueError) as e:
            self.reporter.report_error(
                "DocumentAgent.process_turn", "Profile store failure", e
            )
            return AgentReply(
                response="",
                status=ReplyStatus.ERROR,
                error=f"Profile store failure: {e}",
            )

        session.collected = dict(profile)
        missing = self._next_missing(profile)

        if missing is None:
            session.status = CollectionStatus.COMPLETE
            session.current_field = None
            self.sessions.pop(turn.session_id, None)
            summary = ", ".join(f"{name}={profile[name]}" for name in self.required_fields)
            return AgentReply(
                response=f"All data collected: {summary}",
                metadata={"profile": dict(profile)},
            )

        session.status = CollectionStatus.COLLECTING
        session.current_field = missing
        label = missing.replace("_", " ")
        return AgentReply(
            response=f"Please provide your {label}.",
            metadata={"missing": missing, "updated": sorted(updates)},
        )

    async def cleanup(self) -> None:
        """Drop all per-session state."""
        self.sessions.clear()
