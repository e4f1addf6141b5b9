# indexing_insights/core/assistant.py
from __future__ import annotations
from contextlib import contextmanager
import logging
import time
from typing import Any, Optional
import uuid

from indexing_insights.core.aggregation_executor import ReadOnlyAggregationExecutor
from indexing_insights.core.models import (
    AssistantResponse,
    ClarificationResponse,
    ErrorResponse,
    NoDataResponse,
    SuccessResponse,
    UnsupportedResponse,
)
from indexing_insights.core.pipeline_validation import PipelineValidationError, validate_pipeline
from indexing_insights.core.query_generator import QueryGenerator, UnsupportedQueryError
from indexing_insights.core.redact import redact
from indexing_insights.core.response_classifier import DEFAULT_POLICY, ClassifierPolicy, classify
from indexing_insights.core.response_formatter import format_decision
from indexing_insights.core.suggestions import (
    CLARIFICATION_SUGGESTIONS,
    ERROR_HINT,
    FORMAT_ERROR_HINT,
    NO_DATA_HINT,
    UNSUPPORTED_SUGGESTIONS,
)

MIN_QUESTION_LENGTH = 5


class ResponseFormattingError(Exception):
    pass


class AssistantService:
    """
    Turns one user question into one AssistantResponse.

    Every failure is converted to a response here; nothing raises to the caller.
    """

    def __init__(
        self,
        generator: QueryGenerator,
        executor: ReadOnlyAggregationExecutor,
        *,
        policy: ClassifierPolicy = DEFAULT_POLICY,
        min_question_length: int = MIN_QUESTION_LENGTH,
        logger: Optional[logging.Logger] = None,
    ):
        self.generator = generator
        self.executor = executor
        self.policy = policy
        self.min_question_length = min_question_length
        self.logger = logger or logging.getLogger(__name__)

    @contextmanager
    def _step(self, name: str, trace_id: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            dt = int((time.perf_counter() - t0) * 1000)
            self.logger.info("step=%s latency_ms=%d trace_id=%s", name, dt, trace_id)

    # === Main entry ===
    def handle_question(self, question: Any) -> AssistantResponse:
        if not isinstance(question, str) or len(question.strip()) < self.min_question_length:
            return ClarificationResponse(
                message="Can you please rephrase your question with more detail?",
                suggestions=list(CLARIFICATION_SUGGESTIONS),
            )

        trace_id = str(uuid.uuid4())
        question = question.strip()
        self.logger.info("Processing question trace_id=%s: %s", trace_id, question)
        try:
            return self._answer(question, trace_id)
        except (UnsupportedQueryError, PipelineValidationError) as exc:
            self.logger.info("Unsupported question trace_id=%s: %s", trace_id, exc)
            return UnsupportedResponse(
                message="Sorry, I couldn't understand that question.",
                suggestions=list(UNSUPPORTED_SUGGESTIONS),
            )
        except ResponseFormattingError as exc:
            self.logger.error("Failed to format response trace_id=%s: %s", trace_id, redact(str(exc)))
            return ErrorResponse(
                message="I encountered an issue formatting the response data.",
                hint=FORMAT_ERROR_HINT,
            )
        except Exception as exc:
            self.logger.error(
                "Assistant error trace_id=%s: %s: %s", trace_id, type(exc).__name__, redact(str(exc))
            )
            return ErrorResponse(
                message="Something went wrong while analyzing your question.",
                hint=ERROR_HINT,
            )

    def _answer(self, question: str, trace_id: str) -> AssistantResponse:
        with self._step("Generation", trace_id):
            raw = self.generator.generate(question)

        with self._step("Validation", trace_id):
            pipeline = validate_pipeline(raw)
        self.logger.info("Generated pipeline trace_id=%s: %s", trace_id, pipeline.text)

        with self._step("Execution", trace_id):
            results = self.executor.execute(pipeline)
        self.logger.info("Query returned %d documents trace_id=%s", len(results), trace_id)

        if not results:
            return NoDataResponse(
                message="I couldn't find relevant data for your query.",
                hint=NO_DATA_HINT,
            )

        capped = len(results) >= self.executor.max_documents
        if capped:
            self.logger.warning("Result set capped at %d documents trace_id=%s", len(results), trace_id)

        try:
            decision = classify(question, results, self.policy)
            formatted = format_decision(
                question, decision, total=len(results), summary_size=self.policy.summary_size, capped=capped
            )
        except Exception as exc:
            raise ResponseFormattingError(f"{type(exc).__name__}: {exc}") from exc
        self.logger.info(
            "Response type=%s reason=%s trace_id=%s", decision.response_type.value, decision.reason, trace_id
        )

        return SuccessResponse(
            message=formatted.message,
            data=formatted.data,
            query=pipeline.as_list(),
            responseType=formatted.response_type,
        )
