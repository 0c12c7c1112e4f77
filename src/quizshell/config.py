"""Runtime settings from defaults, environment and command-line flags."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

ENV_PREFIX = "QUIZSHELL_"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    db_path: Path = Path(".quizshell") / "quizzes.sqlite"
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"
    seed: bool = True

    def override(self, **changes: object) -> Settings:
        """Return a copy with every non-None change applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from defaults plus `QUIZSHELL_*` environment variables."""
    source = os.environ if env is None else env
    settings = Settings()
    changes: dict[str, object] = {}

    db_path = source.get(f"{ENV_PREFIX}DB", "").strip()
    if db_path:
        changes["db_path"] = Path(db_path)
    host = source.get(f"{ENV_PREFIX}HOST", "").strip()
    if host:
        changes["host"] = host
    port = source.get(f"{ENV_PREFIX}PORT", "").strip()
    if port:
        changes["port"] = parse_port(port)
    level = source.get(f"{ENV_PREFIX}LOG_LEVEL", "").strip()
    if level:
        changes["log_level"] = parse_log_level(level)
    seed = source.get(f"{ENV_PREFIX}SEED", "").strip()
    if seed:
        changes["seed"] = _parse_bool(seed)
    return settings.override(**changes)


def parse_port(value: str) -> int:
    """Parse a TCP port number."""
    try:
        port = int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid port: {value!r}") from exc
    if not (0 <= port <= 65535):
        raise ValueError(f"Port out of range: {port}")
    return port


def parse_log_level(value: str) -> str:
    """Normalize a loguru level name."""
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean: {value!r}")
