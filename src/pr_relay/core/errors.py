"""Error taxonomy for trigger validation and dispatch."""

from __future__ import annotations

from typing import Literal, TypeAlias

DispatchErrorCategory: TypeAlias = Literal[
    "auth_configuration",
    "target_not_found",
    "configuration_missing",
    "dispatch_failed",
]

AUTH_FAILED_MESSAGE = "GitHub authentication failed. Check GITHUB_TOKEN configuration."
NOT_FOUND_MESSAGE = "GitHub repository not found. Check GITHUB_REPO configuration."
CONFIGURATION_MISSING_MESSAGE = "Service is not configured for dispatch."
DISPATCH_FAILED_MESSAGE = "Failed to trigger workflow"


class TriggerValidationError(ValueError):
    """Raised when an inbound trigger body violates the schema."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Invalid input")
        self.errors = errors


class DispatchError(RuntimeError):
    """Dispatch failure with explicit category."""

    category: DispatchErrorCategory = "dispatch_failed"

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthConfigurationError(DispatchError):
    """Remote rejected the configured credentials."""

    category: DispatchErrorCategory = "auth_configuration"

    def __init__(self) -> None:
        super().__init__(AUTH_FAILED_MESSAGE)


class TargetNotFoundError(DispatchError):
    """Remote reported the control repository as missing."""

    category: DispatchErrorCategory = "target_not_found"

    def __init__(self) -> None:
        super().__init__(NOT_FOUND_MESSAGE)


class ConfigurationMissingError(DispatchError):
    """Required configuration is absent and pre-flight checks are enabled."""

    category: DispatchErrorCategory = "configuration_missing"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            CONFIGURATION_MISSING_MESSAGE,
            details=f"Missing variables: {', '.join(missing)}",
        )
        self.missing = missing


class GenericDispatchError(DispatchError):
    """Any other outbound failure."""

    def __init__(self, details: str) -> None:
        super().__init__(DISPATCH_FAILED_MESSAGE, details=details)
