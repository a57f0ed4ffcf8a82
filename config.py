"""
config.py — Runtime Settings
=============================
Everything tunable lives here so the engine, validators and web layer
read one object instead of scattered constants.

Values come from environment variables with the VISUALIZER_ prefix:

    VISUALIZER_DEFAULT_SPEED   slow | medium | fast | turbo
    VISUALIZER_MIN_INTERVAL_MS floor for any interval the UI asks for
    VISUALIZER_MAX_ITEMS       longest array / key list accepted
    VISUALIZER_MAX_CAPACITY    largest knapsack capacity accepted
    VISUALIZER_MAX_SESSIONS    live browser sessions kept before the oldest is dropped
    VISUALIZER_LOG_LEVEL       DEBUG | INFO | WARNING | …
    VISUALIZER_HOST / _PORT    Flask bind address
    VISUALIZER_SECRET_KEY      session signing key (random if unset)
"""

import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional


ENV_PREFIX = "VISUALIZER_"


@dataclass(frozen=True)
class Settings:
    default_speed:    str = "medium"
    min_interval_ms:  float = 20.0
    max_items:        int = 64
    max_capacity:     int = 200
    max_sessions:     int = 256
    log_level:        str = "INFO"
    host:             str = "127.0.0.1"
    port:             int = 5000
    secret_key:       str = field(default_factory=lambda: secrets.token_hex(32))


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or an explicit mapping in tests)."""
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        default_speed=env.get(ENV_PREFIX + "DEFAULT_SPEED", defaults.default_speed),
        min_interval_ms=_float(env, "MIN_INTERVAL_MS", defaults.min_interval_ms),
        max_items=_int(env, "MAX_ITEMS", defaults.max_items),
        max_capacity=_int(env, "MAX_CAPACITY", defaults.max_capacity),
        max_sessions=_int(env, "MAX_SESSIONS", defaults.max_sessions),
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        host=env.get(ENV_PREFIX + "HOST", defaults.host),
        port=_int(env, "PORT", defaults.port),
        secret_key=env.get(ENV_PREFIX + "SECRET_KEY") or defaults.secret_key,
    )


# module-level default; validators and the web app read this unless a
# caller passes its own Settings
SETTINGS = load_settings()
