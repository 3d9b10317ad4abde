"""
Environment loading and runtime settings.

Settings come from ``JOBBOARD_*`` environment variables, optionally seeded
from a ``.env`` file in the working directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when a setting is missing its expected shape."""
    pass


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from project root if present. Existing variables win."""
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def _read_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e


def _read_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Tunables for the simulated collaborators and the engines."""

    debounce_ms: int = 500
    upload_latency: float = 2.0
    upload_success_rate: float = 0.9
    save_latency: float = 1.5
    save_success_rate: float = 0.9
    points_min: int = 10
    points_max: int = 50
    initial_points: int = 450
    log_level: str = "INFO"

    def __post_init__(self):
        if self.debounce_ms < 0:
            raise ConfigError("debounce_ms must be >= 0")
        if self.upload_latency < 0 or self.save_latency < 0:
            raise ConfigError("latencies must be >= 0")
        for name in ("upload_success_rate", "save_success_rate"):
            rate = getattr(self, name)
            if not 0.0 <= rate <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {rate}")
        if self.points_min < 0 or self.points_max < self.points_min:
            raise ConfigError(
                f"points range [{self.points_min}, {self.points_max}] is invalid"
            )
        if self.initial_points < 0:
            raise ConfigError("initial_points must be >= 0")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            debounce_ms=_read_int(env, "JOBBOARD_DEBOUNCE_MS", 500),
            upload_latency=_read_float(env, "JOBBOARD_UPLOAD_LATENCY", 2.0),
            upload_success_rate=_read_float(env, "JOBBOARD_UPLOAD_SUCCESS_RATE", 0.9),
            save_latency=_read_float(env, "JOBBOARD_SAVE_LATENCY", 1.5),
            save_success_rate=_read_float(env, "JOBBOARD_SAVE_SUCCESS_RATE", 0.9),
            points_min=_read_int(env, "JOBBOARD_POINTS_MIN", 10),
            points_max=_read_int(env, "JOBBOARD_POINTS_MAX", 50),
            initial_points=_read_int(env, "JOBBOARD_INITIAL_POINTS", 450),
            log_level=env.get("JOBBOARD_LOG_LEVEL", "INFO"),
        )
