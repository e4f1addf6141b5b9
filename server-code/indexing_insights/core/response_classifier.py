# indexing_insights/core/response_classifier.py
"""
Decide whether an assistant answer is rendered as text, a table or a chart.

The checks are naming-convention matches on lowercase field names and question
words, not type inference. Order matters:

1. a single row with an aggregate-looking key is always text;
2. explicit chart / table words win for 2..50 rows;
3. 2..50 rows default to a chart when ranking words meet a positive number,
   otherwise a table;
4. more than 50 rows are cut to the first few and summarised as text;
5. anything else is text.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

AGGREGATE_KEYWORDS: Tuple[str, ...] = ("total", "count", "average", "sum", "jobs")
TABLE_KEYWORDS: Tuple[str, ...] = ("table", "list", "show me", "display")
CHART_KEYWORDS: Tuple[str, ...] = ("chart", "graph", "plot", "visualize", "trends", "compare")
RANKING_KEYWORDS: Tuple[str, ...] = ("compare", "top", "best", "most", "highest", "lowest")

LARGE_RESULT_THRESHOLD = 50
SUMMARY_SIZE = 5


class ResponseType(str, Enum):
    TEXT = "text"
    TABLE = "table"
    CHART = "chart"


@dataclass(frozen=True)
class ClassifierPolicy:
    large_result_threshold: int = LARGE_RESULT_THRESHOLD
    summary_size: int = SUMMARY_SIZE
    aggregate_keywords: Tuple[str, ...] = AGGREGATE_KEYWORDS
    table_keywords: Tuple[str, ...] = TABLE_KEYWORDS
    chart_keywords: Tuple[str, ...] = CHART_KEYWORDS
    ranking_keywords: Tuple[str, ...] = RANKING_KEYWORDS


DEFAULT_POLICY = ClassifierPolicy()


@dataclass(frozen=True)
class ShapeDecision:
    response_type: ResponseType
    rows: List[Dict[str, Any]]
    reason: str


def mentions_any(question: str, keywords: Sequence[str]) -> bool:
    q = (question or "").lower()
    return any(k in q for k in keywords)


def is_aggregate_result(results: Sequence[Mapping[str, Any]], keywords: Sequence[str] = AGGREGATE_KEYWORDS) -> bool:
    if len(results) != 1:
        return False
    return any(any(k in str(key).lower() for k in keywords) for key in results[0].keys())


def is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def has_positive_numeric(results: Sequence[Mapping[str, Any]]) -> bool:
    return any(is_positive_number(v) for row in results for v in row.values())


def classify(
    question: str,
    results: Sequence[Mapping[str, Any]],
    policy: ClassifierPolicy = DEFAULT_POLICY,
) -> ShapeDecision:
    rows = [dict(r) for r in results]
    n = len(rows)
    is_list = 1 < n <= policy.large_result_threshold

    if is_aggregate_result(rows, policy.aggregate_keywords):
        return ShapeDecision(ResponseType.TEXT, rows, "aggregate")

    if is_list and mentions_any(question, policy.chart_keywords):
        return ShapeDecision(ResponseType.CHART, rows, "chart requested")
    if is_list and mentions_any(question, policy.table_keywords):
        return ShapeDecision(ResponseType.TABLE, rows, "table requested")

    if is_list:
        if has_positive_numeric(rows) and mentions_any(question, policy.ranking_keywords):
            return ShapeDecision(ResponseType.CHART, rows, "comparison detected")
        return ShapeDecision(ResponseType.TABLE, rows, "list result")

    if n > policy.large_result_threshold:
        return ShapeDecision(ResponseType.TEXT, rows[: policy.summary_size], "large result")

    return ShapeDecision(ResponseType.TEXT, rows, "default")
