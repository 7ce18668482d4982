"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from typing import Literal

SUPPORTED_DECK_COUNTS = (1, 2, 4, 6)


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    return int(os.getenv(name, str(default)))


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: _env_int("REDIS_PORT", 6379))
    db: int = field(default_factory=lambda: _env_int("REDIS_DB", 0))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class StorageConfig:
    """Where player records are persisted."""

    backend: Literal["json", "redis", "memory"] = field(
        default_factory=lambda: os.getenv("RECORD_STORE", "json").lower()  # type: ignore[return-value]
    )
    path: str = field(default_factory=lambda: os.getenv("RECORD_PATH", "player_stats.json"))
    redis: RedisConfig = field(default_factory=RedisConfig)

    def __post_init__(self) -> None:
        if self.backend not in ("json", "redis", "memory"):
            raise ValueError(f"Unknown record store backend: {self.backend}")


@dataclass(frozen=True)
class GameConfig:
    """Default table configuration."""

    starting_chips: int = field(default_factory=lambda: _env_int("CARDROOM_STARTING_CHIPS", 200))
    table_bet: int = field(default_factory=lambda: _env_int("CARDROOM_TABLE_BET", 20))
    num_decks: int = field(default_factory=lambda: _env_int("CARDROOM_DECKS", 1))
    low_water_mark: int = 15
    blackjack_payout: float = 1.5
    high_roller_payout: int = 40
    text_speed: int = 1  # 0=fast, 1=normal, 2=slow
    upcard_mode: bool = False

    def __post_init__(self) -> None:
        """Validate table settings."""
        if self.num_decks not in SUPPORTED_DECK_COUNTS:
            raise ValueError(f"num_decks must be one of {SUPPORTED_DECK_COUNTS}")
        if self.starting_chips < 1:
            raise ValueError("starting_chips must be at least 1")
        if self.table_bet < 1:
            raise ValueError("table_bet must be at least 1")
        if self.text_speed not in (0, 1, 2):
            raise ValueError("text_speed must be 0, 1 or 2")

    @property
    def delay_ms(self) -> int:
        """Display pacing for the configured text speed."""
        return {0: 10, 1: 120, 2: 300}[self.text_speed]


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    game: GameConfig = field(default_factory=GameConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


# Global configuration instance
config = AppConfig()
