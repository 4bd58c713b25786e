"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from toolchat_server.gemini import GeminiClient
from toolchat_server.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the server, and checks
    whether the configured model is reachable if the client is initialized.
    """
    model_connected = None
    model = None

    if hasattr(request.app.state, "gemini_client"):
        gemini_client: GeminiClient = request.app.state.gemini_client
        model = gemini_client.model

        try:
            model_connected = await gemini_client.check_connection()
            logger.debug(f"Gemini connectivity check: {model_connected}")
        except Exception as e:
            logger.warning(f"Gemini connectivity check failed: {e}")
            model_connected = False

    return HealthResponse(
        status="ok",
        version="0.1.0",
        model_connected=model_connected,
        model=model,
    )
