"""Persisted per-player records."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PersistedRecord(BaseModel):
    """Lifetime statistics for one player name."""

    name: str = Field(..., min_length=1)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    ties: int = Field(default=0, ge=0)  # Kept for the record schema; no outcome increments it
    best_streak: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    biggest_win: int = Field(default=0, ge=0)
    total_games: int = Field(default=0, ge=0)
    blackjacks: int = Field(default=0, ge=0)
    achievements: set[str] = Field(default_factory=set)

    @field_validator("achievements", mode="before")
    @classmethod
    def _split_delimited(cls, value: Any) -> Any:
        """Accept the comma-delimited form as well as a list."""
        if isinstance(value, str):
            return {token.strip() for token in value.split(",") if token.strip()}
        return value

    def to_storage(self) -> dict[str, Any]:
        """Serialize for a record store (achievements sorted for stable output)."""
        data = self.model_dump(mode="json")
        data["achievements"] = sorted(self.achievements)
        return data

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> "PersistedRecord":
        """Validate a stored record; raises ``ValidationError`` when corrupted."""
        return cls.model_validate(data)


@dataclass
class SessionTally:
    """Outcome counts for the current program run only."""

    wins: int = 0
    losses: int = 0
    ties: int = 0
    blackjacks: int = 0


__all__ = ["PersistedRecord", "SessionTally"]
