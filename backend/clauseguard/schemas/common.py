"""Common response schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="ok, or degraded when Valkey is unreachable")
    environment: str = Field(..., description="Current environment")
    valkey: bool = Field(..., description="Whether the Valkey store answered a ping")
    llm_configured: bool = Field(..., description="Whether endpoint, model and API key are all set")


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str = Field(..., description="Response message")
