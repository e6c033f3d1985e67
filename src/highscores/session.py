"""In-memory game sessions used to vouch for a score submission."""

import time
import uuid
from enum import Enum

from pydantic import BaseModel, Field

from .exceptions import InvalidGame, SessionEnded
from .models import GameName


class SessionState(str, Enum):
    """Lifecycle states of a game session."""

    CREATED = "CREATED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


def _now_ms() -> int:
    return int(time.time() * 1000)


class GameSession(BaseModel):
    """One play-through: an id, a start instant and a move counter.

    Sessions live only as long as the game that created them and are never
    persisted. Moves only ever go up, and a session ends exactly once.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    start_time: int = Field(default_factory=_now_ms, description="Epoch ms")
    moves: int = Field(default=0, ge=0)
    game: GameName
    state: SessionState = SessionState.CREATED

    @property
    def ended(self) -> bool:
        return self.state == SessionState.ENDED

    def record_move(self, count: int = 1) -> int:
        """Count player actions and return the new total."""
        if self.ended:
            raise SessionEnded(f"Session {self.id} has already ended")
        if count < 0:
            raise ValueError("Move count cannot decrease")
        self.moves += count
        self.state = SessionState.ACTIVE
        return self.moves

    def duration_ms(self, now: int | None = None) -> int:
        """Milliseconds elapsed since the session started."""
        current = _now_ms() if now is None else now
        return max(0, current - self.start_time)

    def end(self) -> None:
        if self.ended:
            raise SessionEnded(f"Session {self.id} has already ended")
        self.state = SessionState.ENDED


def create_game_session(game: GameName | str) -> GameSession:
    """Start a new session for a leaderboard game."""
    try:
        game_name = GameName(game)
    except ValueError as e:
        raise InvalidGame(f"Invalid game: {game}") from e
    return GameSession(game=game_name)
