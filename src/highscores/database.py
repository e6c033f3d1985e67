"""DynamoDB operations for the high scores store."""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings, get_settings
from .exceptions import StoreUnavailable
from .models import GameName, HighScore, ScoreSubmission


class HighScoresDatabase:
    """DynamoDB operations for high score records."""

    def __init__(
        self, table_name: str | None = None, settings: Settings | None = None
    ) -> None:
        """Initialize database connection."""
        self.settings = settings or get_settings()
        self.table_name = table_name or self.settings.table_name
        if not self.table_name:
            raise ValueError("Table name must be provided")
        self.dynamodb = boto3.resource(
            "dynamodb",
            region_name=self.settings.region,
            endpoint_url=self.settings.endpoint_url,
        )
        self.table = self.dynamodb.Table(self.table_name)

    def ping(self) -> None:
        """Issue the cheapest possible read to prove the store answers."""
        try:
            self.table.scan(
                Limit=1,
                ProjectionExpression="#id",
                ExpressionAttributeNames={"#id": "id"},
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailable(f"Failed to reach high scores store: {e}") from e

    def insert_score(
        self, submission: ScoreSubmission, created_at: datetime | None = None
    ) -> HighScore:
        """Write one score record and return it as stored."""
        created = created_at or datetime.now(UTC)
        score_id = str(uuid.uuid4())
        game = GameName(submission.game).value

        # Zero padded score first so a descending query yields the top scores;
        # timestamp and id keep keys unique for equal scores.
        sort_key = f"{submission.score:015.3f}#{created.isoformat()}#{score_id}"

        item: dict[str, Any] = {
            "game": game,
            "sort_key": sort_key,
            "id": score_id,
            "username": submission.username,
            "score": Decimal(str(submission.score)),
            "created_at": created.isoformat(),
        }

        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailable(f"Failed to save score: {e}") from e

        return HighScore(
            username=submission.username, score=submission.score, created_at=created
        )

    def get_top_scores(self, game: GameName | str, limit: int = 10) -> list[HighScore]:
        """Get the highest scores recorded for a game, best first."""
        try:
            response = self.table.query(
                KeyConditionExpression=Key("game").eq(GameName(game).value),
                ScanIndexForward=False,
                Limit=limit,
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailable(f"Failed to fetch scores: {e}") from e

        return [self._to_high_score(item) for item in response.get("Items", [])]

    @staticmethod
    def _to_high_score(item: dict[str, Any]) -> HighScore:
        raw_score = item["score"]
        score: int | float
        if isinstance(raw_score, Decimal) and raw_score == raw_score.to_integral_value():
            score = int(raw_score)
        else:
            score = float(str(raw_score))

        return HighScore(
            username=str(item["username"]),
            score=score,
            created_at=datetime.fromisoformat(str(item["created_at"])),
        )
