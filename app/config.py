from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PORT = 3001


@dataclass(frozen=True, slots=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Pause between a scoring move and the next round.
    round_restart_delay: float = 3.0
    # Pause before the computer opponent plays.
    cpu_move_delay: float = 1.0

    log_level: str = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    value = float(raw)
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


def _get_port() -> int:
    raw = os.environ.get("PORT")
    if not raw:
        return DEFAULT_PORT
    return int(raw)


def load_settings() -> Settings:
    return Settings(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=_get_port(),
        round_restart_delay=_env_float("TETRACHORD_ROUND_RESTART_DELAY", 3.0),
        cpu_move_delay=_env_float("TETRACHORD_CPU_MOVE_DELAY", 1.0),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
