from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from alumni_hub.infrastructure.config import Settings

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]


def add_default_middlewares(app: FastAPI, settings: Settings) -> None:
    # The portal front end runs on the Next.js dev ports locally
    if settings.env in ("development", "staging"):
        allowed_origins = DEV_ORIGINS
    else:
        allowed_origins = list(settings.cors_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
