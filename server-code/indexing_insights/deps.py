# indexing_insights/deps.py
from __future__ import annotations
from functools import lru_cache

from pymongo import MongoClient
from pymongo.collection import Collection

from indexing_insights.settings import Settings
from indexing_insights.core.aggregation_executor import ReadOnlyAggregationExecutor
from indexing_insights.core.assistant import AssistantService
from indexing_insights.core.dashboard_service import DashboardService
from indexing_insights.core.gemini_client import GeminiClient
from indexing_insights.core.indexing_repository import IndexingRunRepository
from indexing_insights.core.query_generator import QueryGenerator
from indexing_insights.core.response_classifier import ClassifierPolicy


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def mongo_client() -> MongoClient:
    s = settings()
    # Connects lazily; server selection timeout bounds the first failing call
    return MongoClient(s.MONGODB_URI, serverSelectionTimeoutMS=s.MONGO_SERVER_SELECTION_TIMEOUT_MS)


@lru_cache(maxsize=1)
def collection() -> Collection:
    s = settings()
    client = mongo_client()
    db = client[s.MONGODB_DB] if s.MONGODB_DB else client.get_default_database(default="botson-ai")
    return db[s.MONGODB_COLLECTION]


@lru_cache(maxsize=1)
def gemini() -> GeminiClient:
    s = settings()
    return GeminiClient(
        api_key=s.GEMINI_API_KEY,
        model=s.GEMINI_MODEL,
        fallback_model=s.GEMINI_FALLBACK_MODEL,
        timeout_seconds=s.GEMINI_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=1)
def aggregation_executor() -> ReadOnlyAggregationExecutor:
    s = settings()
    return ReadOnlyAggregationExecutor(
        collection=collection(),
        max_documents=s.MAX_RESULT_DOCUMENTS,
        max_time_ms=s.MONGO_MAX_TIME_MS,
    )


@lru_cache(maxsize=1)
def assistant() -> AssistantService:
    s = settings()
    policy = ClassifierPolicy(
        large_result_threshold=s.LARGE_RESULT_THRESHOLD,
        summary_size=s.SUMMARY_SIZE,
    )
    return AssistantService(
        QueryGenerator(gemini()),
        aggregation_executor(),
        policy=policy,
        min_question_length=s.MIN_QUESTION_LENGTH,
    )


@lru_cache(maxsize=1)
def repository() -> IndexingRunRepository:
    return IndexingRunRepository(collection(), max_time_ms=settings().MONGO_MAX_TIME_MS)


@lru_cache(maxsize=1)
def dashboard() -> DashboardService:
    return DashboardService(repository())
