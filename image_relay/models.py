"""Response models shared by the relay routes."""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")


class ErrorResponse(BaseModel):
    """JSON body returned for every 4xx/5xx response."""

    error: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Validation context; never set for upstream failures")

    def to_content(self) -> dict[str, Any]:
        """Serialize without unset fields so the body is just ``{"error": ...}``."""
        return self.model_dump(exclude_none=True)
