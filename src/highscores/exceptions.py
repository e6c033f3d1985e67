"""Errors raised by the high scores service."""


class HighScoresError(Exception):
    """Base class for high scores errors."""


class SubmissionRejected(HighScoresError):
    """A score submission failed local validation."""

    reason = "rejected"
    default_message = "Score submission rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFields(SubmissionRejected):
    reason = "missing_fields"
    default_message = "Missing required fields"


class InvalidGame(SubmissionRejected):
    reason = "invalid_game"
    default_message = "Invalid game"


class InvalidUsername(SubmissionRejected):
    reason = "invalid_username"
    default_message = "Username must be 3 characters"


class InvalidScore(SubmissionRejected):
    reason = "invalid_score"
    default_message = "Invalid score"


class EngagementTooLow(SubmissionRejected):
    reason = "engagement_too_low"
    default_message = "Insufficient game activity recorded"


class InvalidSession(SubmissionRejected):
    reason = "invalid_session"
    default_message = "Invalid session format"


class SessionEnded(HighScoresError, ValueError):
    """A move or end was recorded on a session that already ended."""


class StoreUnavailable(HighScoresError, RuntimeError):
    """The high scores store could not be reached or rejected the request."""
