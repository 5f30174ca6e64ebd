"""Deferred collaborator slots.

An agent can be constructed before all of its collaborators exist. A
DeferredSlot holds such a collaborator and makes the two states explicit:
``AWAITING_COLLABORATOR`` until ``attach`` is called, ``READY`` afterwards.
Operations that depend on the collaborator check the slot instead of
assuming the value is present.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SlotState(Enum):
    """Readiness of a deferred collaborator."""

    AWAITING_COLLABORATOR = "awaiting_collaborator"
    READY = "ready"


class CollaboratorNotReady(RuntimeError):
    """Raised by ``DeferredSlot.require`` before the collaborator is attached."""

    def __init__(self, slot_name: str) -> None:
        super().__init__(f"Collaborator '{slot_name}' has not been attached")
        self.slot_name = slot_name


class DeferredSlot(Generic[T]):
    """Holder for a collaborator that may be supplied after construction.

    Attach policy: the first ``attach`` wins. Later calls are logged and
    ignored, returning False. With ``replace=True`` later calls replace
    the collaborator and return True.

    Writers serialize on a lock. Readers take a single snapshot of the
    reference through ``get``, so they see either the old or the new value.
    """

    def __init__(self, name: str, value: T | None = None, *, replace: bool = False) -> None:
        self.name = name
        self.replace = replace
        self._value: T | None = value
        self._lock = threading.Lock()

    @property
    def state(self) -> SlotState:
        """Current readiness of the slot."""
        if self._value is None:
            return SlotState.AWAITING_COLLABORATOR
        return SlotState.READY

    @property
    def ready(self) -> bool:
        """True once a collaborator is attached."""
        return self._value is not None

    def attach(self, value: T) -> bool:
        """Attach the collaborator.

        Returns:
            True if the value was stored, False if ignored by the policy.

        Raises:
            ValueError: If ``value`` is None.
        """
        if value is None:
            raise ValueError(f"Cannot attach None to slot '{self.name}'")

        with self._lock:
            if self._value is not None and not self.replace:
                logger.warning("Slot '%s' already attached, ignoring new collaborator", self.name)
                return False
            replaced = self._value is not None
            self._value = value

        if replaced:
            logger.info("Slot '%s' collaborator replaced", self.name)
        else:
            logger.info("Slot '%s' collaborator attached", self.name)
        return True

    def get(self) -> T | None:
        """Return the collaborator, or None while awaiting it."""
        return self._value

    def require(self) -> T:
        """Return the collaborator or raise CollaboratorNotReady."""
        value = self._value
        if value is None:
            raise CollaboratorNotReady(self.name)
        return value
