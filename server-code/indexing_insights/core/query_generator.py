# indexing_insights/core/query_generator.py
from __future__ import annotations
from datetime import date, datetime, timezone
import logging
from typing import Callable, Optional, Protocol

from indexing_insights.core.prompt_builder import UNSUPPORTED_SENTINEL, build_prompt


class UnsupportedQueryError(Exception):
    """The model declared the question ambiguous, off-topic or unanswerable."""


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def contains_sentinel(text: str) -> bool:
    return UNSUPPORTED_SENTINEL.lower() in (text or "").lower()


class QueryGenerator:
    def __init__(
        self,
        completion: CompletionClient,
        *,
        today: Callable[[], date] = utc_today,
        logger: Optional[logging.Logger] = None,
    ):
        self.completion = completion
        self.today = today
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, question: str) -> str:
        prompt = build_prompt(question, self.today())
        raw = self.completion.complete(prompt)
        self.logger.debug("completion raw response: %r", raw)
        if contains_sentinel(raw):
            raise UnsupportedQueryError("Model returned the UNSUPPORTED sentinel")
        return raw.strip()
