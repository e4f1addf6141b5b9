# indexing_insights/docs.py
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from typing import Any, Dict, List

from indexing_insights.settings import Settings

TAGS_METADATA: List[Dict[str, Any]] = [
    {
        "name": "health",
        "description": "Liveness & MongoDB connectivity checks.",
    },
    {
        "name": "dashboard",
        "description": (
            "Metrics cards, charts and the paginated log table. "
            "Accepts `startDate`, `endDate`, `client`, `country`, `status`, `page`, `limit`, `granularity`."
        ),
    },
    {
        "name": "assistant",
        "description": (
            "Ask natural language questions about indexing runs. "
            "Gemini writes a read-only **MongoDB aggregation pipeline**, which is validated, executed "
            "and returned as text, a table or chart data."
        ),
    },
]


def create_app(settings: Settings) -> FastAPI:
    """
    Central place for Swagger/OpenAPI metadata and docs URLs.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Job-indexing telemetry analytics over **MongoDB** (read-only aggregations) "
            "with a **Gemini**-backed natural language assistant.\n\n"
            "Use `POST /api/assistant` with `{\"question\": \"...\"}` to ask a question."
        ),
        openapi_url="/openapi.json",
        docs_url="/docs",     # Swagger UI
        redoc_url="/redoc",   # ReDoc
        openapi_tags=TAGS_METADATA,
    )

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
            tags=TAGS_METADATA,
        )
        schema["servers"] = [
            {"url": "http://127.0.0.1:5000", "description": "Local dev"},
        ]
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi
    return app
