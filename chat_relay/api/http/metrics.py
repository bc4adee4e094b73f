"""Prometheus scrape target for the chat relay."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter()


@router.get(
    "/metrics",
    response_class=Response,
    summary="Chat relay metrics",
    tags=["metrics"],
)
async def metrics() -> Response:
    """
    Export connection, participant and broadcast metrics.

    Excluded from the uvicorn access log together with /health, see
    `chat_relay.uvicorn_filters.ExcludeMetricsFilter`.

    Example:
        ```
        # HELP chat_participants Number of registered chat participants
        # TYPE chat_participants gauge
        chat_participants 2.0
        ```
    """
    return Response(
        content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST
    )
