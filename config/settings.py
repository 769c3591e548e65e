import os
from dataclasses import dataclass, field
from typing import List
import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARTICIPANTS = 4
DEFAULT_ROOM_EVICTION_DELAY = 30.0
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def get_allowed_origins() -> List[str]:
    """Get allowed origins from ALLOWED_ORIGINS, any origin if unset"""
    env_origins = os.getenv("ALLOWED_ORIGINS", "").split(",")
    env_origins = [origin.strip() for origin in env_origins if origin.strip()]
    return env_origins or ["*"]


@dataclass(frozen=True)
class Settings:
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    room_eviction_delay: float = DEFAULT_ROOM_EVICTION_DELAY
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    environment: str = "development"


def load_settings() -> Settings:
    """Build settings from the process environment"""
    return Settings(
        max_participants=_get_int("MAX_PARTICIPANTS", DEFAULT_MAX_PARTICIPANTS),
        room_eviction_delay=_get_float("ROOM_EVICTION_DELAY", DEFAULT_ROOM_EVICTION_DELAY),
        allowed_origins=get_allowed_origins(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_get_int("PORT", 3001),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        environment=os.getenv("ENVIRONMENT", "development"),
    )


def validate_environment() -> Settings:
    """Validate the signaling settings, raising on anything unusable"""
    try:
        settings = load_settings()
    except ValueError as e:
        raise RuntimeError(f"Invalid numeric environment variable: {e}") from e

    problems = []
    if settings.max_participants < 1:
        problems.append("MAX_PARTICIPANTS must be at least 1")
    if settings.room_eviction_delay < 0:
        problems.append("ROOM_EVICTION_DELAY must not be negative")
    if settings.log_level not in LOG_LEVELS:
        problems.append(f"Unknown LOG_LEVEL: {settings.log_level}")
    if problems:
        raise RuntimeError(f"Invalid environment: {'; '.join(problems)}")

    logger.debug(f"Loaded settings: {settings}")
    return settings
