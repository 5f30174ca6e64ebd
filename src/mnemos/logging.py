"""JSONL logging and the error-reporting boundary."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

_stdlib_logger = logging.getLogger("mnemos")


class ErrorReporter(Protocol):
    """Sink for diagnostic error reports.

    Implementations record context for operators; they never build
    user-facing text.
    """

    def report_error(self, operation: str, message: str, error: BaseException | None) -> None:
        """Report a failure inside ``operation``."""
        ...


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    flow_id: str | None = None
    session_id: str | None = None
    agent_type: str | None = None
    operation: str | None = None
    message: str | None = None
    error_type: str | None = None
    error: str | None = None
    duration_ms: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured logs in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "logs.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".mnemos" / "logs"
        self.log_dir = Path(log_dir)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_flow_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_flow_id(self, flow_id: str | None) -> None:
        """Set the current flow_id for all subsequent logs."""
        self._current_flow_id = flow_id

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), default=str) + "\n")

    def log(
        self,
        event: str,
        *,
        flow_id: str | None = None,
        session_id: str | None = None,
        agent_type: str | None = None,
        operation: str | None = None,
        message: str | None = None,
        error_type: str | None = None,
        error: str | None = None,
        duration_ms: float | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            flow_id=flow_id or self._current_flow_id,
            session_id=session_id,
            agent_type=agent_type,
            operation=operation,
            message=message,
            error_type=error_type,
            error=error,
            duration_ms=duration_ms,
            extra=extra if extra else {},
        )
        self._write(entry)

    def report_error(
        self,
        operation: str,
        message: str,
        error: BaseException | None = None,
        *,
        flow_id: str | None = None,
    ) -> None:
        """Record a failure inside ``operation``.

        Writes an ``error`` entry and mirrors it to the stdlib logger.
        """
        _stdlib_logger.error(
            "%s: %s", operation, message, exc_info=error if error is not None else None
        )
        try:
            self.log(
                "error",
                flow_id=flow_id,
                operation=operation,
                message=message,
                error_type=type(error).__name__ if error is not None else None,
                error=str(error) if error is not None else None,
            )
        except OSError as e:
            _stdlib_logger.warning("Could not write error entry to %s: %s", self.log_path, e)

    def log_agent_created(
        self,
        agent_type: str,
        *,
        flow_id: str | None = None,
        state: str | None = None,
    ) -> None:
        """Log a successful agent construction."""
        self.log(
            "agent_created",
            flow_id=flow_id,
            agent_type=agent_type,
            state=state,
        )

    def log_facts_fused(
        self,
        session_id: str,
        fetched: int,
        fused: int,
        *,
        flow_id: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Log the outcome of a memory augmentation."""
        self.log(
            "facts_fused",
            flow_id=flow_id,
            session_id=session_id,
            duration_ms=duration_ms,
            fetched=fetched,
            fused=fused,
        )


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger


def reset_logger() -> None:
    """Reset the global logger (for testing)."""
    global _logger
    _logger = None
