from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_STEPS = 500
DEFAULT_MAX_STEPS = 20000


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    default_steps: int = DEFAULT_STEPS
    max_steps: int = DEFAULT_MAX_STEPS
    arena_capacity: int = 0
    arena_growable: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            default_steps=_env_int("CRR_DEFAULT_STEPS", DEFAULT_STEPS),
            max_steps=_env_int("CRR_MAX_STEPS", DEFAULT_MAX_STEPS),
            arena_capacity=_env_int("CRR_ARENA_CAPACITY", 0),
            arena_growable=_env_bool("CRR_ARENA_GROWABLE", True),
            log_level=os.getenv("CRR_LOG_LEVEL", "INFO").upper(),
        )
