"""Trigger API schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from pr_relay.models.trigger import DispatchAck

TRIGGERED_MESSAGE = "GitHub Action workflow triggered successfully"


class TriggerResponse(BaseModel):
    """Accepted trigger payload."""

    success: bool = True
    message: str = TRIGGERED_MESSAGE
    data: DispatchAck


class ErrorDetail(BaseModel):
    """Error description inside the standard envelope."""

    message: str
    details: list[str] | str | None = None
    path: str | None = None
    stack: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: ErrorDetail

    def body(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str = "healthy"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    service: str
