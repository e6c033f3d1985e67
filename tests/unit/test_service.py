"""Tests for high scores service layer."""

from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest

from highscores.exceptions import StoreUnavailable
from highscores.models import GameName, HighScore, ScoreSubmission
from highscores.service import (
    SESSION_ENDED,
    STORE_UNAVAILABLE,
    HighScoresService,
)
from highscores.session import GameSession, SessionState
from tests.conftest import SESSION_ID


class TestHighScoresService:
    """Tests for HighScoresService business logic."""

    @pytest.fixture(autouse=True)
    def _service(self, settings) -> None:
        self.mock_database = MagicMock()
        self.service = HighScoresService(database=self.mock_database, settings=settings)

    def _session(self, game: GameName, moves: int, start_time: int = 0) -> GameSession:
        session = GameSession(game=game, start_time=start_time)
        session.record_move(moves)
        return session

    def test_health_check_ok(self) -> None:
        now = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)

        status = self.service.health_check(now=now)

        self.mock_database.ping.assert_called_once()
        assert status.status == "ok"
        assert status.database == "connected"
        assert status.error is None
        assert status.timestamp == "2024-01-15T10:30:00+00:00"
        assert status.service == "high-scores-api"
        assert status.version == "1.0.0"

    def test_health_check_degraded(self) -> None:
        self.mock_database.ping.side_effect = StoreUnavailable("table not found")

        status = self.service.health_check()

        assert status.status == "degraded"
        assert status.database == "error"
        assert status.error == "table not found"
        assert status.timestamp

    def test_submit_session_accepts_2048(self) -> None:
        session = self._session(GameName.GAME_2048, moves=6)

        result = self.service.submit_session(session, 120, "ab1", now=3500)

        assert result.success is True
        assert result.error is None
        self.mock_database.insert_score.assert_called_once()
        submission = self.mock_database.insert_score.call_args[0][0]
        assert isinstance(submission, ScoreSubmission)
        assert submission.game == GameName.GAME_2048
        assert submission.username == "AB1"
        assert submission.score == 120
        assert submission.session_id == session.id
        assert submission.session_duration == 3500
        assert submission.moves == 6
        assert session.state == SessionState.ENDED

    def test_submit_session_snake_too_fast(self) -> None:
        session = self._session(GameName.SNAKE, moves=40)

        result = self.service.submit_session(session, 500, "KMW", now=4000)

        assert result.success is False
        assert result.reason == "engagement_too_low"
        assert result.error == "Score submission too fast - suspicious"
        self.mock_database.insert_score.assert_not_called()
        assert session.ended

    def test_submit_session_too_few_moves(self) -> None:
        session = self._session(GameName.MEMORY_GAME, moves=7)

        result = self.service.submit_session(session, 500, "KMW", now=20_000)

        assert result.reason == "engagement_too_low"
        assert result.error == "Insufficient game activity recorded"

    def test_submit_session_invalid_username_first(self) -> None:
        session = self._session(GameName.SNAKE, moves=0)

        result = self.service.submit_session(session, -5, "a", now=10)

        assert result.success is False
        assert result.reason == "invalid_username"
        assert result.error == "Username must be 3 characters"
        self.mock_database.insert_score.assert_not_called()

    def test_submit_session_invalid_score(self) -> None:
        session = self._session(GameName.SNAKE, moves=20)

        result = self.service.submit_session(session, 1_000_001, "KMW", now=60_000)

        assert result.reason == "invalid_score"
        assert result.error == "Invalid score"
        self.mock_database.insert_score.assert_not_called()

    def test_submit_session_store_failure_is_reported(self) -> None:
        self.mock_database.insert_score.side_effect = StoreUnavailable("timed out")
        session = self._session(GameName.SNAKE, moves=20)

        result = self.service.submit_session(session, 300, "KMW", now=60_000)

        assert result.success is False
        assert result.reason == STORE_UNAVAILABLE
        assert result.error == "timed out"
        self.mock_database.insert_score.assert_called_once()

    def test_submit_session_only_once(self) -> None:
        session = self._session(GameName.SNAKE, moves=20)
        self.service.submit_session(session, 300, "KMW", now=60_000)

        result = self.service.submit_session(session, 300, "KMW", now=60_000)

        assert result.success is False
        assert result.reason == SESSION_ENDED
        self.mock_database.insert_score.assert_called_once()

    def test_submit_score_checks_engagement_floor(self) -> None:
        submission = ScoreSubmission(
            game="snake", username="ABC", score=5, session_duration=10, moves=0
        )

        result = self.service.submit_score(submission)

        assert result.success is False
        assert result.reason == "engagement_too_low"
        self.mock_database.insert_score.assert_not_called()

    def test_submit_score_checks_session_format(self) -> None:
        submission = ScoreSubmission(
            game="2048",
            username="ABC",
            score=5,
            session_id="not-a-uuid",
            session_duration=5000,
            moves=10,
        )

        result = self.service.submit_score(submission)

        assert result.success is False
        assert result.reason == "invalid_session"
        self.mock_database.insert_score.assert_not_called()

    def test_submit_score_without_session_figures(self) -> None:
        result = self.service.submit_score(
            ScoreSubmission(game="snake", username="ABC", score=5)
        )

        assert result.success is True
        self.mock_database.insert_score.assert_called_once()

    def test_submit_payload_success(self) -> None:
        result = self.service.submit_payload(
            {
                "game": "2048",
                "username": "ab1",
                "score": 120,
                "sessionId": SESSION_ID,
                "sessionDuration": 3500,
                "moves": 6,
            }
        )

        assert result.success is True
        submission = self.mock_database.insert_score.call_args[0][0]
        assert submission.username == "AB1"
        assert submission.session_id == SESSION_ID

    def test_submit_payload_rejected(self) -> None:
        result = self.service.submit_payload({"game": "tic-tac-toe", "username": "ABC", "score": 1})

        assert result.success is False
        assert result.reason == "invalid_game"
        assert result.error == "Invalid game"
        self.mock_database.insert_score.assert_not_called()

    def test_get_leaderboard_success(self) -> None:
        entries = [
            HighScore(username="KMW", score=103, created_at=datetime(2024, 1, 15, tzinfo=UTC)),
            HighScore(username="AMY", score=95, created_at=datetime(2024, 1, 14, tzinfo=UTC)),
        ]
        self.mock_database.get_top_scores.return_value = entries

        result = self.service.get_leaderboard("snake", 10)

        self.mock_database.get_top_scores.assert_called_once_with(GameName.SNAKE, 10)
        assert result.data == entries
        assert result.error is None

    def test_get_leaderboard_caps_limit(self) -> None:
        self.mock_database.get_top_scores.return_value = []

        self.service.get_leaderboard(GameName.SNAKE, 500)

        self.mock_database.get_top_scores.assert_called_once_with(GameName.SNAKE, 100)

    def test_get_leaderboard_store_failure(self) -> None:
        self.mock_database.get_top_scores.side_effect = StoreUnavailable("unreachable")

        result = self.service.get_leaderboard("snake")

        assert result.data == []
        assert result.error == "unreachable"


class TestServiceWithStore:
    """The submission pipeline end to end against a mocked table."""

    def test_submitted_session_shows_on_leaderboard(self, dynamodb_table, settings) -> None:
        service = HighScoresService(settings=settings)
        session = GameSession(game=GameName.GAME_2048, start_time=0)
        session.record_move(6)

        result = service.submit_session(session, 120, "ab1", now=3500)
        leaderboard = service.get_leaderboard("2048")

        assert result.success is True
        assert [(s.username, s.score) for s in leaderboard.data] == [("AB1", 120)]

    def test_health_check_against_store(self, dynamodb_table, settings) -> None:
        assert HighScoresService(settings=settings).health_check().status == "ok"

    def test_health_check_without_table(self, aws, settings) -> None:
        status = HighScoresService(settings=settings).health_check()

        assert status.status == "degraded"
        assert status.error
