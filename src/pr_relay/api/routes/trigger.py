"""Trigger and status routes."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from pr_relay.api.deps import get_dispatcher, get_settings
from pr_relay.api.schemas.trigger import TriggerResponse
from pr_relay.config import Settings
from pr_relay.core.dispatcher import Dispatcher
from pr_relay.core.errors import TriggerValidationError
from pr_relay.core.status import service_status
from pr_relay.core.validator import validate
from pr_relay.models.trigger import ServiceStatus

router = APIRouter(prefix="/api", tags=["trigger"])


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail="Request body too large",
    )


async def _read_body(request: Request, limit: int) -> bytes:
    """Read at most `limit` bytes, refusing early on a larger declared length."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise _too_large()
    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise _too_large()
    return bytes(buffer)


async def _read_json(request: Request, limit: int) -> Any:
    raw = await _read_body(request, limit)
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise TriggerValidationError(["Request body must be valid JSON"]) from exc


@router.post(
    "/trigger-pr-workflow",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=TriggerResponse,
)
async def trigger_pr_workflow(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> TriggerResponse:
    body = await _read_json(request, settings.max_body_bytes)
    result = validate(body)
    if result.request is None:
        raise TriggerValidationError(result.errors)
    ack = await dispatcher.dispatch(result.request)
    return TriggerResponse(data=ack)


@router.get("/status", response_model=ServiceStatus)
async def get_status(settings: Settings = Depends(get_settings)) -> ServiceStatus:
    return service_status(settings)
