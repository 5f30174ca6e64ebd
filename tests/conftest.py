"""Shared fixtures."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from mnemos.logging import JSONLLogger, reset_logger


@pytest.fixture
def reporter() -> Mock:
    """A stand-in error reporter that records calls."""
    return Mock(spec=["report_error"])


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path: Path, monkeypatch) -> JSONLLogger:
    """Point the global JSONL logger at a temporary directory."""
    logger = JSONLLogger(log_dir=tmp_path / "logs")
    monkeypatch.setattr("mnemos.logging._logger", logger)
    yield logger
    reset_logger()
