"""Data models for the high scores service."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_SCORE = 1_000_000
USERNAME_LENGTH = 3


class GameName(str, Enum):
    """Games that have a leaderboard."""

    SNAKE = "snake"
    GAME_2048 = "2048"
    FLAPPY_BIRD = "flappy-bird"
    BRICK_BREAKER = "brick-breaker"
    MEMORY_GAME = "memory-game"


# Local-only games, never accepted as a submission target.
EXCLUDED_GAMES = ("tic-tac-toe",)


class GameMinimums(BaseModel):
    """Engagement floor for one game."""

    min_duration: int = Field(..., ge=0, description="Minimum play time in ms")
    min_moves: int = Field(..., ge=0, description="Minimum recorded moves")

    model_config = ConfigDict(frozen=True)


GAME_MINIMUMS: dict[GameName, GameMinimums] = {
    GameName.SNAKE: GameMinimums(min_duration=5000, min_moves=10),
    GameName.GAME_2048: GameMinimums(min_duration=3000, min_moves=5),
    GameName.FLAPPY_BIRD: GameMinimums(min_duration=3000, min_moves=5),
    GameName.BRICK_BREAKER: GameMinimums(min_duration=5000, min_moves=10),
    GameName.MEMORY_GAME: GameMinimums(min_duration=10000, min_moves=8),
}

if set(GAME_MINIMUMS) != set(GameName):
    raise RuntimeError("GAME_MINIMUMS must have exactly one entry per GameName")


class ScoreSubmission(BaseModel):
    """A validated score submission, ready to be written to the store."""

    game: GameName
    username: str = Field(
        ...,
        min_length=USERNAME_LENGTH,
        max_length=USERNAME_LENGTH,
        pattern=r"^[A-Z0-9]+$",
        description="Normalized player initials",
    )
    score: int | float
    session_id: str | None = Field(default=None, alias="sessionId")
    session_duration: float | None = Field(default=None, alias="sessionDuration")
    moves: int | None = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("score")
    @classmethod
    def validate_score_bounds(cls, v: int | float) -> int | float:
        """Keep stored scores inside the sanity ceiling."""
        if not 0 <= v <= MAX_SCORE:
            raise ValueError(f"Score must be between 0 and {MAX_SCORE}")
        return v


class HighScore(BaseModel):
    """A persisted high score as shown on a leaderboard."""

    username: str
    score: int | float
    created_at: datetime


class ScoreSubmitResult(BaseModel):
    """Outcome of a score submission."""

    success: bool
    error: str | None = None
    reason: str | None = None


class LeaderboardResult(BaseModel):
    """Top scores for a game, or the error that prevented reading them."""

    data: list[HighScore] = Field(default_factory=list)
    error: str | None = None


class HealthStatus(BaseModel):
    """Health check response body."""

    status: Literal["ok", "degraded"]
    timestamp: str
    service: str
    version: str
    database: Literal["connected", "error"]
    error: str | None = None

    @property
    def healthy(self) -> bool:
        return self.status == "ok"
