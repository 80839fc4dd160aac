"""Runtime configuration loaded from the environment."""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVICE_NAME = "github-action-pr-trigger"
REQUIRED_VARIABLES = ("GITHUB_TOKEN", "GITHUB_REPO")


class Settings(BaseSettings):
    """Process configuration, built once at startup and passed explicitly."""

    github_repo: str | None = None
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"

    allowed_origins: str = "*"
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = Field(
        default="production",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: str = "INFO"

    dispatch_timeout_seconds: float = 15.0
    preflight_config_check: bool = False

    rate_limit_max: int = 100
    rate_limit_window_seconds: float = 900.0
    max_body_bytes: int = 10 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("github_token", "github_repo", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, SecretStr):
            return SecretStr(value.get_secret_value().strip())
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def token_value(self) -> str:
        if self.github_token is None:
            return ""
        return self.github_token.get_secret_value()

    @property
    def cors_origins(self) -> list[str]:
        origins = [item.strip() for item in self.allowed_origins.split(",") if item.strip()]
        return origins or ["*"]

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def missing_variables(self) -> list[str]:
        """Names of required variables that are unset or empty."""
        present = {
            "GITHUB_TOKEN": bool(self.token_value),
            "GITHUB_REPO": bool(self.github_repo),
        }
        return [name for name in REQUIRED_VARIABLES if not present[name]]
