# indexing_insights/settings.py
from __future__ import annotations
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices


class Settings(BaseSettings):
    # pydantic v2 config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Gemini ---
    GEMINI_API_KEY: str = Field(default="", validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
    # generation model used by the assistant to write aggregation pipelines
    GEMINI_MODEL: str = Field(default="gemini-1.5-pro", validation_alias=AliasChoices("GEMINI_MODEL", "GOOGLE_MODEL"))
    GEMINI_FALLBACK_MODEL: str = "gemini-1.5-flash"
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # --- MongoDB (read-only use) ---
    MONGODB_URI: str = "mongodb://localhost:27017/botson-ai"
    # Falls back to the database named in MONGODB_URI when unset.
    MONGODB_DB: Optional[str] = None
    MONGODB_COLLECTION: str = "job_indexing_logs"
    MONGO_MAX_TIME_MS: int = 20000  # 20s
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MAX_RESULT_DOCUMENTS: int = Field(default=5000, validation_alias=AliasChoices("MAX_RESULT_DOCUMENTS", "DEFAULT_RESULT_LIMIT"))

    # --- Assistant heuristics ---
    MIN_QUESTION_LENGTH: int = 5
    LARGE_RESULT_THRESHOLD: int = 50
    SUMMARY_SIZE: int = 5

    # Misc
    APP_NAME: str = "Indexing Insights API"
    APP_VERSION: str = "1.0.0"
    CORS_ORIGIN: str = "http://localhost:3000"
