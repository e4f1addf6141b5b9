# indexing_insights/core/filters.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from indexing_insights.core.models import DashboardFilters
from indexing_insights.core.schema_contract import STATUSES

GRANULARITIES = ("hourly", "daily", "weekly")
MAX_PAGE_LIMIT = 1000
MAX_RANGE_DAYS = 365


def parse_timestamp(value: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 with milliseconds, e.g. 2025-07-01T00:00:00.000Z."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _positive_int(value: Optional[str]) -> Optional[int]:
    try:
        n = int(value) if value is not None else None
    except ValueError:
        return None
    return n if n and n > 0 else None


def parse_filters(params: Mapping[str, str]) -> DashboardFilters:
    """Lenient query-string parsing: unparseable values are dropped, not rejected."""
    out: Dict[str, Any] = {}

    for key in ("startDate", "endDate"):
        raw = params.get(key)
        dt = parse_timestamp(raw) if raw else None
        if dt is not None:
            out[key] = to_iso(dt)

    if params.get("client"):
        out["client"] = params["client"].strip()
    if params.get("country"):
        out["country"] = params["country"].strip().upper()
    status = (params.get("status") or "").lower()
    if status in STATUSES:
        out["status"] = status

    page = _positive_int(params.get("page"))
    if page:
        out["page"] = page
    limit = _positive_int(params.get("limit"))
    if limit and limit <= MAX_PAGE_LIMIT:
        out["limit"] = limit

    if params.get("granularity") in GRANULARITIES:
        out["granularity"] = params["granularity"]
    return DashboardFilters(**out)


def build_match_stage(filters: DashboardFilters, *, include_client: bool = True) -> Dict[str, Any]:
    match: Dict[str, Any] = {}
    ts: Dict[str, str] = {}
    if filters.startDate:
        ts["$gte"] = filters.startDate
    if filters.endDate:
        ts["$lte"] = filters.endDate
    if ts:
        match["timestamp"] = ts
    if include_client and filters.client:
        # exact match on the client name
        match["transactionSourceName"] = filters.client
    if filters.country:
        match["country_code"] = filters.country.upper()
    if filters.status:
        match["status"] = filters.status.lower()
    return match


def validate_filters(
    filters: DashboardFilters,
    known_clients: Iterable[str] = (),
    known_countries: Iterable[str] = (),
) -> List[str]:
    errors: List[str] = []
    if filters.startDate and filters.endDate:
        start = parse_timestamp(filters.startDate)
        end = parse_timestamp(filters.endDate)
        if start and end:
            if start > end:
                errors.append("Start date cannot be after end date")
            if (end - start).total_seconds() / 86400 > MAX_RANGE_DAYS:
                errors.append(f"Date range cannot exceed {MAX_RANGE_DAYS} days")
    if filters.client and filters.client not in set(known_clients):
        errors.append(f"Client '{filters.client}' does not exist")
    if filters.country and filters.country not in set(known_countries):
        errors.append(f"Country '{filters.country}' does not exist")
    if filters.status and filters.status not in STATUSES:
        errors.append(f"Invalid status '{filters.status}'")
    return errors
