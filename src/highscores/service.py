"""Business logic service for high score operations."""

from datetime import datetime, UTC
from typing import Any

from aws_lambda_powertools import Logger

from .config import SERVICE_NAME, Settings, get_settings
from .database import HighScoresDatabase
from .exceptions import (
    InvalidScore,
    InvalidSession,
    InvalidUsername,
    StoreUnavailable,
    SubmissionRejected,
)
from .models import (
    GameName,
    HealthStatus,
    LeaderboardResult,
    ScoreSubmission,
    ScoreSubmitResult,
)
from .session import GameSession
from .validation import (
    check_engagement,
    normalize_username,
    validate_score,
    validate_session_id,
    validate_submission,
    validate_username,
)

logger = Logger(service=SERVICE_NAME, child=True)

DEFAULT_LEADERBOARD_LIMIT = 10
MAX_LEADERBOARD_LIMIT = 100

STORE_UNAVAILABLE = "store_unavailable"
SESSION_ENDED = "session_ended"


def _rejected(error: SubmissionRejected) -> ScoreSubmitResult:
    return ScoreSubmitResult(success=False, error=error.message, reason=error.reason)


class HighScoresService:
    """Service layer for score submission, leaderboards and health."""

    def __init__(
        self,
        database: HighScoresDatabase | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize service with database dependency."""
        self.settings = settings or get_settings()
        self.db = database or HighScoresDatabase(settings=self.settings)

    def health_check(self, now: datetime | None = None) -> HealthStatus:
        """Probe the store and report service status."""
        timestamp = (now or datetime.now(UTC)).isoformat()
        try:
            self.db.ping()
        except StoreUnavailable as e:
            logger.error("High scores store unreachable", extra={"error": str(e)})
            return HealthStatus(
                status="degraded",
                timestamp=timestamp,
                service=self.settings.service_name,
                version=self.settings.version,
                database="error",
                error=str(e),
            )

        return HealthStatus(
            status="ok",
            timestamp=timestamp,
            service=self.settings.service_name,
            version=self.settings.version,
            database="connected",
        )

    def submit_score(self, submission: ScoreSubmission) -> ScoreSubmitResult:
        """Check a submission against its game's floor and write it to the store.

        The model already holds a normalized username and a bounded score;
        the engagement floor and session id format are checked here. A store
        failure is reported in the result, never raised, and the write is
        not retried.
        """
        try:
            check_engagement(submission.game, submission.session_duration, submission.moves)
            if submission.session_id is not None and not validate_session_id(
                submission.session_id
            ):
                raise InvalidSession()
        except SubmissionRejected as e:
            logger.warning(
                "Score submission rejected",
                extra={"reason": e.reason, "game": submission.game.value},
            )
            return _rejected(e)

        try:
            self.db.insert_score(submission)
        except StoreUnavailable as e:
            logger.error(
                "Failed to save score",
                extra={"game": submission.game.value, "error": str(e)},
            )
            return ScoreSubmitResult(success=False, error=str(e), reason=STORE_UNAVAILABLE)

        logger.info(
            "Score submitted successfully",
            extra={
                "game": submission.game.value,
                "username": submission.username,
                "score": submission.score,
            },
        )
        return ScoreSubmitResult(success=True)

    def submit_payload(self, payload: dict[str, Any]) -> ScoreSubmitResult:
        """Validate a raw submission body and, if it passes, store it."""
        try:
            submission = validate_submission(payload)
        except SubmissionRejected as e:
            logger.warning(
                "Score submission rejected",
                extra={"reason": e.reason, "game": payload.get("game")},
            )
            return _rejected(e)

        return self.submit_score(submission)

    def submit_session(
        self,
        session: GameSession,
        final_score: Any,
        raw_username: Any,
        now: int | None = None,
    ) -> ScoreSubmitResult:
        """Run the submission pipeline for a finished game session.

        Validators run in order (username, score, engagement floor) and the
        first failure is returned as a rejection without touching the store.
        The session ends here whatever the outcome.

        Args:
            session: The session the score was played in
            final_score: Score shown to the player at game over
            raw_username: Initials as typed by the player
            now: Epoch milliseconds to measure the session against

        Returns:
            ScoreSubmitResult describing acceptance or the rejection reason
        """
        if session.ended:
            return ScoreSubmitResult(
                success=False,
                error=f"Session {session.id} has already ended",
                reason=SESSION_ENDED,
            )

        duration = session.duration_ms(now)
        session.end()

        try:
            if not validate_username(raw_username):
                raise InvalidUsername()
            if not validate_score(final_score):
                raise InvalidScore()
            check_engagement(session.game, duration, session.moves)
        except SubmissionRejected as e:
            logger.warning(
                "Score submission rejected",
                extra={
                    "reason": e.reason,
                    "game": session.game.value,
                    "session_id": session.id,
                    "duration": duration,
                    "moves": session.moves,
                },
            )
            return _rejected(e)

        submission = ScoreSubmission(
            game=session.game,
            username=normalize_username(raw_username),
            score=final_score,
            session_id=session.id,
            session_duration=duration,
            moves=session.moves,
        )
        return self.submit_score(submission)

    def get_leaderboard(
        self, game: GameName | str, limit: int = DEFAULT_LEADERBOARD_LIMIT
    ) -> LeaderboardResult:
        """Get the top scores for a game.

        Args:
            game: Game to read
            limit: Maximum entries, capped at 100

        Returns:
            LeaderboardResult, with ``error`` set if the store failed
        """
        game_name = GameName(game)
        limit = min(limit, MAX_LEADERBOARD_LIMIT)
        try:
            scores = self.db.get_top_scores(game_name, limit)
        except StoreUnavailable as e:
            logger.error(
                "Failed to fetch scores",
                extra={"game": game_name.value, "error": str(e)},
            )
            return LeaderboardResult(error=str(e))

        logger.info(
            "Leaderboard retrieved successfully",
            extra={"game": game_name.value, "entries_count": len(scores)},
        )
        return LeaderboardResult(data=scores)
