"""
Centralized configuration for the Daifugo room server.

Configuration is loaded from (in order of precedence):
1. Environment variables
2. .env file (if exists)
3. Default values

Usage:
    from config import config
    print(config.PORT)
    print(config.ROUND_END_DELAY)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable (used for timer delays)."""
    try:
        return float(os.environ.get(key, str(default)))
    except ValueError:
        return default


@dataclass
class ServerConfig:
    """Server configuration."""
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Error tracking
    SENTRY_DSN: str = ""

    # Room settings
    MAX_PLAYERS_PER_ROOM: int = 4
    MIN_PLAYERS: int = 2
    ROOM_CODE_LENGTH: int = 4
    MAX_NAME_LENGTH: int = 20

    # Deferred phase transitions (seconds)
    ROUND_END_DELAY: float = 3.0
    EXCHANGE_DELAY: float = 3.0
    NEXT_ROUND_DELAY: float = 3.0
    SERIES_RESET_DELAY: float = 5.0

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls(
            HOST=get_env("HOST", "0.0.0.0"),
            PORT=get_env_int("PORT", 3000),
            DEBUG=get_env_bool("DEBUG", False),
            LOG_LEVEL=get_env("LOG_LEVEL", "INFO"),
            ENVIRONMENT=get_env("ENVIRONMENT", "development"),
            SENTRY_DSN=get_env("SENTRY_DSN", ""),
            MAX_PLAYERS_PER_ROOM=get_env_int("MAX_PLAYERS_PER_ROOM", 4),
            MIN_PLAYERS=get_env_int("MIN_PLAYERS", 2),
            ROOM_CODE_LENGTH=get_env_int("ROOM_CODE_LENGTH", 4),
            MAX_NAME_LENGTH=get_env_int("MAX_NAME_LENGTH", 20),
            ROUND_END_DELAY=get_env_float("ROUND_END_DELAY", 3.0),
            EXCHANGE_DELAY=get_env_float("EXCHANGE_DELAY", 3.0),
            NEXT_ROUND_DELAY=get_env_float("NEXT_ROUND_DELAY", 3.0),
            SERIES_RESET_DELAY=get_env_float("SERIES_RESET_DELAY", 5.0),
        )


# Global config instance - loaded once at module import
config = ServerConfig.from_env()
