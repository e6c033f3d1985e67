"""Process-wide configuration for the high scores service."""

import os
from dataclasses import dataclass
from functools import lru_cache

from aws_lambda_powertools import Logger

SERVICE_NAME = "high-scores-api"
SERVICE_VERSION = "1.0.0"

logger = Logger(service=SERVICE_NAME, child=True)

PLACEHOLDER_TABLE_NAME = "placeholder-high-scores"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class Settings:
    """Settings read once from the environment."""

    table_name: str
    region: str
    endpoint_url: str | None = None
    public_origin: str | None = None
    service_name: str = SERVICE_NAME
    version: str = SERVICE_VERSION
    configured: bool = True


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build settings from environment variables.

    A missing table name does not abort startup: a warning is logged and a
    placeholder is substituted. Every store call made with such settings
    fails, so the service reports itself degraded until redeployed.
    """
    env = os.environ if environ is None else environ

    table_name = env.get("HIGH_SCORES_TABLE", "").strip()
    configured = bool(table_name)
    if not configured:
        logger.warning(
            "High scores store not configured, using placeholder table",
            extra={"missing": ["HIGH_SCORES_TABLE"], "placeholder": PLACEHOLDER_TABLE_NAME},
        )
        table_name = PLACEHOLDER_TABLE_NAME

    return Settings(
        table_name=table_name,
        region=env.get("AWS_DEFAULT_REGION") or DEFAULT_REGION,
        endpoint_url=env.get("HIGH_SCORES_ENDPOINT_URL") or None,
        public_origin=env.get("PUBLIC_ORIGIN") or None,
        configured=configured,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings of this process, loading them on first use."""
    return load_settings()
