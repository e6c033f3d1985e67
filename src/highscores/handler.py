"""Lambda handler for the high scores API."""

import json
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import (
    APIGatewayRestResolver,
    Response,
    content_types,
)
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from .config import SERVICE_NAME
from .models import GameName
from .service import STORE_UNAVAILABLE, HighScoresService
from .validation import is_valid_game_name

logger = Logger(service=SERVICE_NAME)
app = APIGatewayRestResolver()
service = HighScoresService()

HEALTH_METHODS = "GET, OPTIONS"
SCORES_METHODS = "GET, POST, OPTIONS"

# Allowed methods per known path; any other method on these paths is a 405.
ROUTE_METHODS = {
    "/api/health": HEALTH_METHODS,
    "/api/scores": SCORES_METHODS,
}


def cors_headers(allowed_methods: str) -> dict[str, str]:
    """CORS headers echoing the caller's origin.

    Without an Origin header this falls back to the configured public
    origin and then to ``*``, so any origin is allowed by default.
    """
    origin = (
        app.current_event.headers.get("origin")
        or service.settings.public_origin
        or "*"
    )
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": allowed_methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def json_response(body: Any, status_code: int, allowed_methods: str) -> Response:
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(body),
        headers=cors_headers(allowed_methods),
    )


def preflight_response(allowed_methods: str) -> Response:
    return Response(status_code=204, body=None, headers=cors_headers(allowed_methods))


@app.get("/api/health")
def health_check() -> Response:
    """Health check endpoint."""
    status = service.health_check()
    return json_response(
        status.model_dump(exclude_none=True),
        200 if status.healthy else 503,
        HEALTH_METHODS,
    )


@app.route("/api/health", method="OPTIONS")
def health_preflight() -> Response:
    return preflight_response(HEALTH_METHODS)


@app.post("/api/scores")
def submit_score() -> Response:
    """Submit a score to a game's leaderboard."""
    try:
        try:
            payload = app.current_event.json_body
        except (TypeError, ValueError) as e:
            logger.warning("Invalid score submission body", extra={"error": str(e)})
            return json_response({"error": "Invalid JSON body"}, 400, SCORES_METHODS)

        if not isinstance(payload, dict):
            return json_response({"error": "Invalid JSON body"}, 400, SCORES_METHODS)

        result = service.submit_payload(payload)

        if result.success:
            return json_response({"success": True}, 200, SCORES_METHODS)
        if result.reason == STORE_UNAVAILABLE:
            return json_response({"error": "Failed to save score"}, 500, SCORES_METHODS)
        return json_response({"error": result.error}, 400, SCORES_METHODS)

    except Exception as e:
        logger.exception("Unexpected error", extra={"error": str(e)})
        return json_response({"error": "Internal server error"}, 500, SCORES_METHODS)


@app.get("/api/scores")
def get_leaderboard() -> Response:
    """Get the top scores for a game."""
    game = app.current_event.get_query_string_value("game", "")
    limit_param = app.current_event.get_query_string_value("limit", "10")

    if not is_valid_game_name(game):
        return json_response({"error": "Invalid game parameter"}, 400, SCORES_METHODS)

    try:
        limit = int(limit_param) if limit_param else 10
        if limit < 1:
            raise ValueError()
    except ValueError:
        return json_response(
            {"error": "Invalid limit: must be a positive integer"}, 400, SCORES_METHODS
        )

    logger.info("Leaderboard request", extra={"game": game, "limit": limit})
    result = service.get_leaderboard(GameName(game), limit)

    if result.error:
        return json_response({"error": "Failed to fetch scores"}, 500, SCORES_METHODS)

    return json_response(
        [score.model_dump(mode="json") for score in result.data], 200, SCORES_METHODS
    )


@app.route("/api/scores", method="OPTIONS")
def scores_preflight() -> Response:
    return preflight_response(SCORES_METHODS)


@app.not_found
def method_not_allowed(exc: NotFoundError) -> Response:
    """Answer unrouted methods on known paths with 405, anything else with 404."""
    allowed_methods = ROUTE_METHODS.get(app.current_event.path.rstrip("/"))
    if allowed_methods is None:
        return json_response({"error": "Not found"}, 404, "GET, POST, OPTIONS")

    logger.warning(
        "Method not allowed",
        extra={"method": app.current_event.http_method, "path": app.current_event.path},
    )
    return json_response({"error": "Method not allowed"}, 405, allowed_methods)


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Lambda handler entry point."""
    return app.resolve(event, context)
