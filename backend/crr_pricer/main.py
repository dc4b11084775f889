from __future__ import annotations

import logging

from fastapi import FastAPI

from crr_pricer.api.router import api_router
from crr_pricer.config import Settings
from crr_pricer.services.arena import ThreadArenas


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    logging.getLogger("crr_pricer").setLevel(settings.log_level)

    app = FastAPI(title="CRR Lattice Pricer API", version="0.1.0")

    app.state.settings = settings
    # One arena per worker thread, owned by this app instance
    app.state.arenas = ThreadArenas(settings.arena_capacity, growable=settings.arena_growable)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
