"""Validation rules applied to score submissions."""

import math
import re
from typing import Any

from .exceptions import (
    EngagementTooLow,
    InvalidGame,
    InvalidScore,
    InvalidSession,
    InvalidUsername,
    MissingFields,
)
from .models import (
    GAME_MINIMUMS,
    MAX_SCORE,
    USERNAME_LENGTH,
    GameName,
    ScoreSubmission,
)

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")
_SESSION_ID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_valid_game_name(game: Any) -> bool:
    """Return True if ``game`` names a game with a leaderboard."""
    return isinstance(game, str) and game in {g.value for g in GameName}


def normalize_username(username: str) -> str:
    """Upper-case and drop everything outside ``[A-Z0-9]``."""
    return _NON_ALPHANUMERIC.sub("", username.upper())


def validate_username(username: Any) -> bool:
    if not isinstance(username, str):
        return False
    return len(normalize_username(username)) == USERNAME_LENGTH


def validate_score(score: Any) -> bool:
    # bool is an int subclass but never a score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return False
    if isinstance(score, float) and not math.isfinite(score):
        return False
    return 0 <= score <= MAX_SCORE


def validate_session_id(session_id: Any) -> bool:
    return isinstance(session_id, str) and bool(_SESSION_ID.match(session_id))


def check_engagement(
    game: GameName | str,
    duration: float | None = None,
    moves: int | None = None,
) -> None:
    """Raise EngagementTooLow if a play-through is below the game's floor.

    This is a heuristic against scripted or trivially fast submissions, not
    a replay of the game. Figures that were not recorded are not checked.
    """
    minimums = GAME_MINIMUMS[GameName(game)]

    if duration is not None and not math.isfinite(duration):
        raise EngagementTooLow("Invalid sessionDuration")
    if duration is not None and duration < minimums.min_duration:
        raise EngagementTooLow("Score submission too fast - suspicious")
    if moves is not None and moves < minimums.min_moves:
        raise EngagementTooLow("Insufficient game activity recorded")


def _optional_number(payload: dict[str, Any], key: str, kinds: tuple = (int, float)) -> Any:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise EngagementTooLow(f"Invalid {key}")
    if isinstance(value, float) and not math.isfinite(value):
        raise EngagementTooLow(f"Invalid {key}")
    return value


def validate_submission(payload: dict[str, Any]) -> ScoreSubmission:
    """Validate a raw submission body and build a ScoreSubmission.

    Checks run in a fixed order and stop at the first failure: required
    fields, game, username, score, engagement floor, session id format.

    Raises:
        SubmissionRejected: one of its subclasses, naming the failed check
    """
    game = payload.get("game")
    username = payload.get("username")
    score = payload.get("score")
    if not game or not username or score is None:
        raise MissingFields()

    if not is_valid_game_name(game):
        raise InvalidGame()

    if not validate_username(username):
        raise InvalidUsername()

    if not validate_score(score):
        raise InvalidScore()

    session_duration = _optional_number(payload, "sessionDuration")
    moves = _optional_number(payload, "moves", (int,))
    check_engagement(game, session_duration, moves)

    session_id = payload.get("sessionId")
    if session_id is not None and not validate_session_id(session_id):
        raise InvalidSession()

    return ScoreSubmission(
        game=GameName(game),
        username=normalize_username(username),
        score=score,
        session_id=session_id,
        session_duration=session_duration,
        moves=moves,
    )
