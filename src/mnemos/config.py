"""Configuration loader.

Loads settings from ~/.mnemos/config.json, then applies environment
overrides (typically populated from a .env file by the entry point).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .llm import DEFAULT_MODEL
from .memory.client import DEFAULT_TIMEOUT
from .memory.ranker import DEFAULT_MAX_FACTS, DEFAULT_MIN_RATING

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".mnemos" / "config.json"
DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass
class MemoryConfig:
    """Settings for memory retrieval and the agents that use it.

    Attributes:
        base_url: Root URL of the knowledge service.
        api_key: Optional API key for the knowledge service.
        timeout: Per-request timeout in seconds.
        max_facts: Maximum facts fused into a context.
        min_rating: Rated facts at or below this score are dropped.
        profiles_db: SQLite file backing document profiles.
        log_dir: Directory for JSONL logs.
        model: LLM model used by the conversation agent.
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    max_facts: int = DEFAULT_MAX_FACTS
    min_rating: float = DEFAULT_MIN_RATING
    profiles_db: Path | None = None
    log_dir: Path | None = None
    model: str = DEFAULT_MODEL

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.profiles_db is None:
            self.profiles_db = Path.home() / ".mnemos" / "profiles.db"

        if self.log_dir is None:
            self.log_dir = Path.home() / ".mnemos" / "logs"

        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

        if self.max_facts < 1:
            raise ValueError("max_facts must be at least 1")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_config(data: dict[str, Any]) -> dict[str, Any]:
    """Pick valid settings out of the ``memory`` section.

    Invalid values are dropped so the dataclass defaults apply.
    """
    section = data.get("memory", {})
    if not isinstance(section, dict):
        return {}

    values: dict[str, Any] = {}

    base_url = section.get("base_url")
    if isinstance(base_url, str) and base_url.strip():
        values["base_url"] = base_url.strip()

    api_key = section.get("api_key")
    if isinstance(api_key, str) and api_key:
        values["api_key"] = api_key

    timeout = section.get("timeout")
    if _is_number(timeout) and timeout > 0:
        values["timeout"] = float(timeout)

    max_facts = section.get("max_facts")
    if isinstance(max_facts, int) and not isinstance(max_facts, bool) and max_facts >= 1:
        values["max_facts"] = max_facts

    min_rating = section.get("min_rating")
    if _is_number(min_rating):
        values["min_rating"] = float(min_rating)

    for key in ("profiles_db", "log_dir"):
        raw = section.get(key)
        if isinstance(raw, str) and raw.strip():
            values[key] = Path(raw).expanduser()

    model = section.get("model")
    if isinstance(model, str) and model.strip():
        values["model"] = model.strip()

    return values


def _env_overrides() -> dict[str, Any]:
    """Read overrides from the environment, ignoring unparsable values."""
    values: dict[str, Any] = {}

    if os.getenv("ZEP_BASE_URL"):
        values["base_url"] = os.environ["ZEP_BASE_URL"]
    if os.getenv("ZEP_API_KEY"):
        values["api_key"] = os.environ["ZEP_API_KEY"]
    if os.getenv("GROQ_MODEL"):
        values["model"] = os.environ["GROQ_MODEL"]

    numeric = {
        "MNEMOS_TIMEOUT": ("timeout", float),
        "MNEMOS_MAX_FACTS": ("max_facts", int),
        "MNEMOS_MIN_RATING": ("min_rating", float),
    }
    for env_name, (key, cast) in numeric.items():
        raw = os.getenv(env_name)
        if not raw:
            continue
        try:
            values[key] = cast(raw)
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", env_name, raw)

    if values.get("timeout", 1) <= 0:
        logger.warning("Ignoring non-positive MNEMOS_TIMEOUT")
        values.pop("timeout")
    if values.get("max_facts", 1) < 1:
        logger.warning("Ignoring MNEMOS_MAX_FACTS below 1")
        values.pop("max_facts")

    return values


def load_config(config_path: Path | None = None) -> MemoryConfig:
    """Load MemoryConfig from a JSON file and the environment.

    The config file should have this structure:
    ```json
    {
      "memory": {
        "base_url": "http://localhost:8000",
        "api_key": "...",
        "timeout": 10,
        "max_facts": 5,
        "min_rating": 0.3
      }
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        MemoryConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    values: dict[str, Any] = {}

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        else:
            if isinstance(data, dict):
                values = _parse_config(data)
            else:
                logger.warning("Config in %s is not an object. Using defaults.", path)

    values.update(_env_overrides())
    return MemoryConfig(**values)


def save_config(config: MemoryConfig, config_path: Path | None = None) -> None:
    """Save non-default settings to a JSON file.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    defaults = MemoryConfig()
    section: dict[str, Any] = {}

    for key in ("base_url", "api_key", "timeout", "max_facts", "min_rating", "model"):
        value = getattr(config, key)
        if value != getattr(defaults, key):
            section[key] = value

    for key in ("profiles_db", "log_dir"):
        value = getattr(config, key)
        if value != getattr(defaults, key):
            section[key] = str(value)

    data: dict[str, Any] = {"memory": section} if section else {}

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
