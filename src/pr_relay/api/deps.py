"""Shared API dependency providers."""

from __future__ import annotations

from fastapi import Request

from pr_relay.config import Settings
from pr_relay.core.dispatcher import Dispatcher


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_dispatcher(request: Request) -> Dispatcher:
    dispatcher: Dispatcher = request.app.state.dispatcher
    return dispatcher
