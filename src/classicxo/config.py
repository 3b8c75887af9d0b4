"""Difficulty table and environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

# Probability of playing the minimax move, indexed by difficulty level - 1.
DIFFICULTY_PROBABILITIES: Tuple[float, ...] = (0.1, 0.3, 0.5, 0.7, 0.9)
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = len(DIFFICULTY_PROBABILITIES)
DEFAULT_DIFFICULTY = 3

LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_difficulty(level: object) -> int:
    """Return ``level`` if it is a supported difficulty, else raise ConfigError."""

    if isinstance(level, bool) or not isinstance(level, int):
        raise ConfigError(f"Difficulty level must be an integer, got {level!r}")
    if not MIN_DIFFICULTY <= level <= MAX_DIFFICULTY:
        raise ConfigError(
            f"Unsupported difficulty level {level}. "
            f"Choose a level between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}."
        )
    return level


def difficulty_probability(level: int) -> float:
    return DIFFICULTY_PROBABILITIES[validate_difficulty(level) - 1]


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Server settings, read from ``CLASSICXO_*`` environment variables."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    default_difficulty: int = DEFAULT_DIFFICULTY

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        port = _parse_int(env.get("CLASSICXO_PORT", "8000"), "CLASSICXO_PORT")
        if not 0 < port < 65536:
            raise ConfigError(f"CLASSICXO_PORT out of range: {port}")

        log_level = env.get("CLASSICXO_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(
                f"CLASSICXO_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}"
            )

        difficulty = validate_difficulty(
            _parse_int(
                env.get("CLASSICXO_DEFAULT_DIFFICULTY", str(DEFAULT_DIFFICULTY)),
                "CLASSICXO_DEFAULT_DIFFICULTY",
            )
        )

        return cls(
            host=env.get("CLASSICXO_HOST", "0.0.0.0"),
            port=port,
            log_level=log_level,
            default_difficulty=difficulty,
        )
