"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of toolchat-server.
        model_connected: Whether the model provider answered the connectivity check.
        model: The configured model name.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of toolchat-server")
    model_connected: bool | None = Field(
        default=None,
        description="Whether the model provider is reachable",
    )
    model: str | None = Field(
        default=None,
        description="Configured model name",
    )
