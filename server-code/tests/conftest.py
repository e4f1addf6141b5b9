from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from indexing_insights.core.aggregation_executor import ReadOnlyAggregationExecutor
from indexing_insights.core.assistant import AssistantService
from indexing_insights.core.query_generator import QueryGenerator

FIXED_TODAY = date(2025, 7, 17)


class FakeCompletion:
    """Stands in for GeminiClient; records every prompt it is given."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = iter(docs)
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._docs)

    def close(self):
        self.closed = True


class FakeCollection:
    """Minimal pymongo Collection double for aggregate()."""

    def __init__(self, docs: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.docs = docs or []
        self.error = error
        self.pipelines: List[List[Dict[str, Any]]] = []
        self.kwargs: List[Dict[str, Any]] = []
        self.cursors: List[FakeCursor] = []

    def aggregate(self, pipeline, **kwargs):
        self.pipelines.append(pipeline)
        self.kwargs.append(kwargs)
        if self.error is not None:
            raise self.error
        cursor = FakeCursor(list(self.docs))
        self.cursors.append(cursor)
        return cursor


@pytest.fixture
def make_service():
    """Build an AssistantService wired to fakes; returns (service, completion, collection)."""

    def _make(text: str = "", docs=None, completion_error=None, store_error=None, max_documents=5000, **kwargs):
        completion = FakeCompletion(text, completion_error)
        collection = FakeCollection(docs, store_error)
        service = AssistantService(
            QueryGenerator(completion, today=lambda: FIXED_TODAY),
            ReadOnlyAggregationExecutor(collection, max_documents=max_documents, max_time_ms=20000),
            **kwargs,
        )
        return service, completion, collection

    return _make
