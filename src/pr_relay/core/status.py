"""Configuration readiness report."""

from __future__ import annotations

from pr_relay.config import SERVICE_NAME, Settings
from pr_relay.models.trigger import ConfigurationReport, ReadinessStatus, ServiceStatus


def service_status(settings: Settings) -> ServiceStatus:
    """Report whether dispatch can be configured, without revealing the token."""
    missing = settings.missing_variables()
    return ServiceStatus(
        service=SERVICE_NAME,
        status=ReadinessStatus.CONFIGURATION_ERROR if missing else ReadinessStatus.READY,
        configuration=ConfigurationReport(
            github_repo=settings.github_repo or "not_configured",
            github_token_configured=bool(settings.token_value),
            missing_variables=missing,
        ),
    )
