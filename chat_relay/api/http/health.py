"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    connections: int
    participants: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(request: Request) -> HealthResponse:
    """
    Report service status and the size of the chat.

    Returns:
        HealthResponse: Number of attached WebSocket connections and of
        registered participants.
    """
    snapshot = await request.app.state.registry.snapshot()

    return HealthResponse(
        status="healthy",
        connections=len(snapshot.connections),
        participants=len(snapshot.names),
    )
