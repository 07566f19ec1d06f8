# src/streetbite/api/app.py
"""
FastAPI application wiring.

Creates the `FastAPI` instance, enables CORS for local map/dashboard frontends,
and mounts the vendor routes from `streetbite.api.routes`.

Run with: `uvicorn streetbite.api.app:app --reload`
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from streetbite.core.logging import configure_logging

from .routes import router

_LOCALHOST_ORIGINS = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _env_list(name: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, "").split(",") if part.strip()]


def _cors_kwargs() -> dict | None:
    """CORS settings from env, or None to skip the middleware.

    - STREETBITE_CORS_ORIGINS: comma-separated explicit origins
    - STREETBITE_CORS_ALLOW_ORIGIN_REGEX: origin regex
    - STREETBITE_CORS_ALLOW_LOCAL=0: drop the localhost default used when nothing else is set
    """
    origins = _env_list("STREETBITE_CORS_ORIGINS")
    regex = os.getenv("STREETBITE_CORS_ALLOW_ORIGIN_REGEX", "").strip()
    allow_local = os.getenv("STREETBITE_CORS_ALLOW_LOCAL", "1").strip().lower() not in {"0", "false", "no", "n"}
    if not regex and not origins and allow_local:
        regex = _LOCALHOST_ORIGINS
    if not origins and not regex:
        return None
    return {
        "allow_origins": origins,
        "allow_origin_regex": regex or None,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST"],
        "allow_headers": ["*"],
    }


def create_app() -> FastAPI:
    configure_logging()
    application = FastAPI(title="StreetBite API", version="0.1.0")
    cors = _cors_kwargs()
    if cors is not None:
        application.add_middleware(CORSMiddleware, **cors)
    application.include_router(router)

    @application.get("/healthz", include_in_schema=False)
    def healthz() -> dict:
        return {"status": "ok"}

    return application


app = create_app()
