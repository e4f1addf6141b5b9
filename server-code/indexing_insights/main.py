# =========================
# indexing_insights/main.py
# =========================
from __future__ import annotations

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from indexing_insights.deps import settings
from indexing_insights.docs import create_app
from indexing_insights.routers import assistant, dashboard, health

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Quiet noisy third-party loggers
logging.getLogger("pymongo").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google").setLevel(logging.WARNING)
logging.getLogger("grpc").setLevel(logging.WARNING)


def build_app() -> FastAPI:
    s = settings()
    app = create_app(s)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in s.CORS_ORIGIN.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # health router defines its own paths ("/health", "/health/db")
    app.include_router(health.router)
    app.include_router(dashboard.router)
    app.include_router(dashboard.lookups)
    app.include_router(assistant.router)
    return app


app = build_app()
