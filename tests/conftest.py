"""Shared fixtures for high scores tests."""

import json
import os
from collections.abc import Generator
from typing import Any

import boto3
import pytest
from moto import mock_aws

# Set before any highscores module reads its settings.
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")  # noqa: S105
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("HIGH_SCORES_TABLE", "high-scores-test")

from highscores.config import Settings  # noqa: E402

TABLE_NAME = "high-scores-test"
SESSION_ID = "3f2b8c1e-9d4a-4c6e-8b7f-1a2b3c4d5e6f"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the test table."""
    return Settings(table_name=TABLE_NAME, region="us-east-1")


@pytest.fixture
def aws() -> Generator[None, None, None]:
    """Mock every AWS call made during the test."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_table(aws: None) -> Any:
    """Create the high scores table in the mocked account."""
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
    table = dynamodb.create_table(
        TableName=TABLE_NAME,
        KeySchema=[
            {"AttributeName": "game", "KeyType": "HASH"},
            {"AttributeName": "sort_key", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "game", "AttributeType": "S"},
            {"AttributeName": "sort_key", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    return table


def create_api_event(
    method: str,
    path: str,
    body: Any = None,
    query: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build an API Gateway REST proxy event."""
    return {
        "resource": path,
        "httpMethod": method,
        "path": path,
        "headers": headers or {},
        "queryStringParameters": query,
        "pathParameters": None,
        "requestContext": {"requestId": "test-request-id", "stage": "test"},
        "body": body if body is None or isinstance(body, str) else json.dumps(body),
        "isBase64Encoded": False,
    }


def response_header(response: dict[str, Any], name: str) -> str | None:
    """Read a header from a resolver response, single or multi value."""
    for key, value in (response.get("headers") or {}).items():
        if key.lower() == name.lower():
            return value
    for key, values in (response.get("multiValueHeaders") or {}).items():
        if key.lower() == name.lower():
            return values[0]
    return None
