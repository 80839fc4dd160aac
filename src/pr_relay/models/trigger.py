"""Pull-request trigger domain models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

REPO_PATTERN = r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$"
EVENT_TYPE = "create-pr"

# Upper bounds in UTF-16 code units, so astral characters count twice.
TEXT_LIMITS = {
    "branch_name": 250,
    "commit_message": 500,
    "pr_title": 250,
    "pr_body": 65536,
}


class TriggerRequest(BaseModel):
    """Validated request to open a pull request through the control repository."""

    model_config = ConfigDict(extra="forbid", strict=True)

    target_repo: str = Field(pattern=REPO_PATTERN)
    branch_name: str = Field(min_length=1, max_length=250)
    file_changes: dict[str, str] = Field(min_length=1)
    commit_message: str = Field(min_length=1, max_length=500)
    pr_title: str = Field(min_length=1, max_length=250)
    pr_body: str = Field(default="", max_length=65536)

    @field_validator(*TEXT_LIMITS)
    @classmethod
    def _check_utf16_length(cls, value: str, info: ValidationInfo) -> str:
        limit = TEXT_LIMITS[info.field_name]
        if len(value.encode("utf-16-le", "surrogatepass")) // 2 > limit:
            raise PydanticCustomError(
                "string_too_long",
                "String should have at most {max_length} characters",
                {"max_length": limit},
            )
        return value


class ClientPayload(BaseModel):
    """Fields forwarded to the automation workflow."""

    target_repo: str
    branch_name: str
    file_changes: dict[str, str]
    commit_message: str
    pr_title: str
    pr_body: str
    request_id: str


class DispatchPayload(BaseModel):
    """Body of a repository-dispatch call."""

    event_type: str = EVENT_TYPE
    client_payload: ClientPayload


class DispatchAck(BaseModel):
    """Acknowledgement returned once the remote accepted the dispatch."""

    target_repo: str
    branch_name: str
    request_id: str
    status: Literal["triggered"] = "triggered"


class ReadinessStatus(StrEnum):
    """Overall configuration readiness."""

    READY = "ready"
    CONFIGURATION_ERROR = "configuration_error"


class ConfigurationReport(BaseModel):
    """Non-sensitive view of the dispatch configuration."""

    github_repo: str
    github_token_configured: bool
    missing_variables: list[str] = Field(default_factory=list)


class ServiceStatus(BaseModel):
    """Result of a status check."""

    service: str
    status: ReadinessStatus
    configuration: ConfigurationReport
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
