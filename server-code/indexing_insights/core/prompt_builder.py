# indexing_insights/core/prompt_builder.py
from __future__ import annotations
from datetime import date
from typing import Iterable

from indexing_insights.core.date_ranges import resolve_relative_dates
from indexing_insights.core.schema_contract import (
    ALLOWED_STAGES,
    COLLECTION_NAME,
    ISO_TIMESTAMP_FORMAT,
    render_schema,
)
from indexing_insights.prompts.versioned.v1.assistant import (
    PIPELINE_PROMPT,
    SUPPORTED_EXAMPLES,
    UNSUPPORTED_EXAMPLES,
)

UNSUPPORTED_SENTINEL = "UNSUPPORTED"


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {x}" for x in items)


def build_prompt(question: str, current_date: date) -> str:
    """
    Render the pipeline-generation prompt for ``question``.

    Pure: the only input besides the question is ``current_date``, which drives
    the resolved date ranges and the current-year / today hints.
    """
    ranges = resolve_relative_dates(question, current_date)
    example = resolve_relative_dates("last month", current_date)[0]
    return PIPELINE_PROMPT.format(
        SENTINEL=UNSUPPORTED_SENTINEL,
        ALLOWED_STAGES=", ".join(ALLOWED_STAGES),
        COLLECTION=COLLECTION_NAME,
        SCHEMA=render_schema(),
        DATE_FORMAT=ISO_TIMESTAMP_FORMAT,
        CURRENT_DATE=current_date.isoformat(),
        CURRENT_YEAR=current_date.year,
        EXAMPLE_START=example.start,
        EXAMPLE_END=example.end,
        SUPPORTED_EXAMPLES=_bullets(SUPPORTED_EXAMPLES),
        UNSUPPORTED_EXAMPLES=_bullets(UNSUPPORTED_EXAMPLES),
        DATE_RANGES=_bullets(r.as_filter_text() for r in ranges) or "(none)",
        QUESTION=question,
    )
