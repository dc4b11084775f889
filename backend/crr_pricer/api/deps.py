from __future__ import annotations

from fastapi import Request

from crr_pricer.config import Settings
from crr_pricer.services.arena import ThreadArenas


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_arenas(request: Request) -> ThreadArenas:
    """FastAPI dependency for the app's per-thread arena registry.

    Call `.get()` inside the endpoint body: sync dependencies and sync
    endpoints may run on different pool threads.
    """
    return request.app.state.arenas
