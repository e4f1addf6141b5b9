# indexing_insights/core/response_formatter.py
from __future__ import annotations
from dataclasses import dataclass
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from indexing_insights.core.response_classifier import ResponseType, SUMMARY_SIZE, ShapeDecision
from indexing_insights.core.schema_contract import ID_FIELD

CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
ID_WORD = re.compile(r"\bId\b")
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class FormattedResponse:
    message: str
    data: List[Dict[str, Any]]
    response_type: ResponseType


def humanize_field(key: str, *, upper_id: bool = False) -> str:
    """'totalJobs' -> 'Total Jobs', 'country_code' -> 'Country code', 'clientId' -> 'Client ID' (upper_id)."""
    label = " ".join(CASE_BOUNDARY.sub(" ", key).replace("_", " ").split())
    label = label[:1].upper() + label[1:]
    if upper_id:
        label = ID_WORD.sub("ID", label)
    return label


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    """Thousands-grouped with at most three decimals, e.g. 125000 -> '125,000'."""
    if value is None:
        return NOT_AVAILABLE
    if not is_number(value):
        return str(value)
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_average(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{float(value):.2f}" if is_number(value) else str(value)


def strip_identifier(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if k != ID_FIELD}


def _first_key(keys: Sequence[str], *needles: str) -> Optional[str]:
    return next((k for k in keys if any(n in k.lower() for n in needles)), None)


def _sentence(question: str, key: str, value: str) -> str:
    return f'Based on your query "{question}", the **{humanize_field(key)}** is **{value}**.'


def _single_message(question: str, row: Mapping[str, Any]) -> str:
    keys = list(row.keys())
    key = _first_key(keys, "total", "jobs") or _first_key(keys, "count") or _first_key(keys, "sum")
    if key:
        return _sentence(question, key, format_number(row[key]))
    key = _first_key(keys, "average", "avg")
    if key:
        return _sentence(question, key, format_average(row[key]))

    meaningful = [k for k in keys if k != ID_FIELD]
    if meaningful:
        return _sentence(question, meaningful[0], format_number(row[meaningful[0]]))

    message = f'Here\'s what I found for "{question}":\n\n'
    for k, v in row.items():
        if k != ID_FIELD:
            message += f"• **{humanize_field(k)}**: {format_number(v)}\n"
    return message


def _list_message(question: str, rows: Sequence[Mapping[str, Any]], total: int, limit: int, capped: bool = False) -> str:
    if capped:
        message = f'I found at least **{total}** results for "{question}" (the result set was capped):\n\n'
    else:
        message = f'I found **{total}** results for "{question}":\n\n'
    for i, row in enumerate(rows[:limit], 1):
        keys = [k for k in row.keys() if k != ID_FIELD]
        if not keys:
            continue
        label = row[keys[0]]
        message += f"{i}. **{NOT_AVAILABLE if label is None else label}**"
        if len(keys) > 1:
            message += f" - {format_number(row[keys[1]])}"
        message += "\n"
    if total > limit:
        message += f"\n... and {total - limit} more results. Ask for a table to see more!"
    return message


def format_as_text(
    question: str,
    rows: Sequence[Mapping[str, Any]],
    *,
    total: Optional[int] = None,
    limit: int = SUMMARY_SIZE,
    capped: bool = False,
) -> FormattedResponse:
    total = len(rows) if total is None else total
    if len(rows) == 1 and total == 1:
        message = _single_message(question, rows[0])
    else:
        message = _list_message(question, rows, total, limit, capped)
    return FormattedResponse(message, [strip_identifier(r) for r in rows[:limit]], ResponseType.TEXT)


def _relabel(row: Mapping[str, Any], *, upper_id: bool) -> Dict[str, Any]:
    return {humanize_field(k, upper_id=upper_id): v for k, v in row.items() if k != ID_FIELD}


def format_as_table(question: str, rows: Sequence[Mapping[str, Any]]) -> FormattedResponse:
    return FormattedResponse(
        f'Here\'s a table showing the results for "{question}":',
        [_relabel(r, upper_id=True) for r in rows],
        ResponseType.TABLE,
    )


def format_as_chart(question: str, rows: Sequence[Mapping[str, Any]]) -> FormattedResponse:
    # Consumers plot the first key as category and the first numeric key as value.
    return FormattedResponse(
        f'Here\'s a chart visualization for "{question}":',
        [_relabel(r, upper_id=False) for r in rows],
        ResponseType.CHART,
    )


def format_decision(
    question: str,
    decision: ShapeDecision,
    *,
    total: int,
    summary_size: int = SUMMARY_SIZE,
    capped: bool = False,
) -> FormattedResponse:
    if decision.response_type is ResponseType.CHART:
        return format_as_chart(question, decision.rows)
    if decision.response_type is ResponseType.TABLE:
        return format_as_table(question, decision.rows)
    return format_as_text(question, decision.rows, total=total, limit=summary_size, capped=capped)
