"""Repository-dispatch relay to GitHub."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx

from pr_relay.config import Settings
from pr_relay.core.errors import (
    AuthConfigurationError,
    ConfigurationMissingError,
    DispatchError,
    GenericDispatchError,
    TargetNotFoundError,
)
from pr_relay.models.trigger import ClientPayload, DispatchAck, DispatchPayload, TriggerRequest

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vnd.github.v3+json"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def build_payload(request: TriggerRequest, timestamp_ms: int) -> DispatchPayload:
    """Reshape a trigger request into a dispatch body for one point in time."""
    return DispatchPayload(
        client_payload=ClientPayload(
            target_repo=request.target_repo,
            branch_name=f"{request.branch_name}-{timestamp_ms}",
            file_changes=request.file_changes,
            commit_message=request.commit_message,
            pr_title=request.pr_title,
            pr_body=request.pr_body,
            request_id=f"req-{timestamp_ms}",
        )
    )


class Dispatcher:
    """Forward validated trigger requests as a single repository-dispatch call.

    Exactly one outbound attempt is made per ``dispatch`` call. Remote
    outcomes are translated into ``DispatchAck`` or a ``DispatchError``
    subclass; the token never appears in either.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock

    @property
    def endpoint(self) -> str:
        base = self._settings.github_api_url.rstrip("/")
        return f"{base}/repos/{self._settings.github_repo}/dispatches"

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self._settings.token_value}".rstrip(),
            "Accept": ACCEPT_HEADER,
            "Content-Type": "application/json",
        }

    async def dispatch(self, request: TriggerRequest) -> DispatchAck:
        if self._settings.preflight_config_check:
            missing = self._settings.missing_variables()
            if missing:
                logger.error("Dispatch refused, missing configuration: %s", ", ".join(missing))
                raise ConfigurationMissingError(missing)

        payload = build_payload(request, self._clock())
        client_payload = payload.client_payload
        try:
            await self._post(payload)
        except DispatchError as exc:
            logger.error(
                "Dispatch for %s failed (%s): %s",
                request.target_repo,
                exc.category,
                exc.details or exc.message,
            )
            raise

        logger.info(
            "Workflow triggered for %s, branch: %s",
            client_payload.target_repo,
            client_payload.branch_name,
        )
        return DispatchAck(
            target_repo=client_payload.target_repo,
            branch_name=client_payload.branch_name,
            request_id=client_payload.request_id,
        )

    async def _post(self, payload: DispatchPayload) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.dispatch_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json=payload.model_dump(mode="json"),
                    headers=self.headers(),
                )
        except httpx.TimeoutException as exc:
            detail = f"timeout: {exc}" if str(exc) else "timeout"
            raise GenericDispatchError(self._redact(detail)) from exc
        except httpx.HTTPError as exc:
            raise GenericDispatchError(self._redact(str(exc) or type(exc).__name__)) from exc
        except (httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise GenericDispatchError(self._redact(str(exc))) from exc

        if response.is_success:
            return
        raise self._map_status(response.status_code)

    def _redact(self, text: str) -> str:
        """Mask the token, raw or byte-escaped, in transport error text."""
        token = self._settings.token_value
        if not token:
            return text
        escaped = repr(token.encode("utf-8"))[2:-1]
        return text.replace(token, "***").replace(escaped, "***")

    @staticmethod
    def _map_status(status_code: int) -> DispatchError:
        if status_code == 401:
            return AuthConfigurationError()
        if status_code == 404:
            return TargetNotFoundError()
        return GenericDispatchError(f"Request failed with status code {status_code}")
