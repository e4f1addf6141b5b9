# indexing_insights/core/dashboard_service.py
from __future__ import annotations
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from indexing_insights.core.filters import to_iso, validate_filters
from indexing_insights.core.indexing_repository import IndexingRunRepository
from indexing_insights.core.models import (
    DashboardFilters,
    IndexingRun,
    Pagination,
    invariant_violations,
    performance_level,
    run_metrics,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 50
MIN_RATED_JOBS = 100
TREND_DAYS = 30
# No freshness signal is stored per run yet, so timeliness is a fixed score.
TIMELINESS_SCORE = 95

STATUS_STYLES = {
    "completed": ("Completed", "#10b981"),
    "failed": ("Failed", "#ef4444"),
    "processing": ("Processing", "#f59e0b"),
}
UNKNOWN_STYLE = ("Unknown", "#6b7280")

EMPTY_METRICS = {
    "totalLogs": 0,
    "totalJobsIndexed": 0,
    "totalJobsFailed": 0,
    "totalRecords": 0,
    "successRate": 0,
    "averageProcessingTime": 0,
    "activeClients": 0,
}


def performance_grade(success_rate: float) -> str:
    for floor, grade in ((95, "A+"), (90, "A"), (85, "B+"), (80, "B"), (75, "C+"), (70, "C")):
        if success_rate >= floor:
            return grade
    return "F"


def performance_rating(success_rate: float, total_jobs: float) -> str:
    if total_jobs < MIN_RATED_JOBS:
        return "insufficient_data"
    return performance_level(success_rate)


def day_over_day_change(current: float, previous: float) -> float:
    if not previous:
        return 0
    return round((current - previous) / previous * 100, 2)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def failure_severity(index_failure_rate: float, metadata_missing_rate: float, filter_loss_rate: float) -> str:
    if index_failure_rate > 20 or metadata_missing_rate > 50 or filter_loss_rate > 80:
        return "critical"
    if index_failure_rate > 10 or metadata_missing_rate > 30 or filter_loss_rate > 60:
        return "high"
    if index_failure_rate > 5 or metadata_missing_rate > 20 or filter_loss_rate > 40:
        return "medium"
    return "low"


def recommendations(row: Dict[str, Any]) -> List[str]:
    out: List[str] = []
    if row.get("indexFailureRate", 0) > 10:
        out.append("Review indexing configuration and error logs")
    if row.get("metadataMissingRate", 0) > 30:
        out.append("Improve metadata enrichment process")
    if row.get("filterLossRate", 0) > 60:
        out.append("Optimize data filtering criteria")
    if row.get("indexFailureRate", 0) > 5:
        out.append("Monitor system resources and capacity")
    return out or ["Monitor performance metrics regularly"]


class DashboardService:
    def __init__(self, repo: IndexingRunRepository):
        self.repo = repo

    def validate(self, filters: DashboardFilters) -> List[str]:
        clients = self.repo.unique_clients() if filters.client else ()
        countries = self.repo.unique_countries() if filters.country else ()
        return validate_filters(filters, clients, countries)

    def logs(self, filters: DashboardFilters) -> Dict[str, Any]:
        page = filters.page or 1
        limit = filters.limit or DEFAULT_PAGE_LIMIT
        logger.info("Fetching dashboard data page=%d limit=%d filters=%s", page, limit, filters.model_dump(exclude_none=True))
        data, total = self.repo.find_many(filters, page, limit)
        pagination = Pagination(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))
        return {"success": True, "data": data, "pagination": pagination.model_dump()}

    def run_detail(self, run_id: str) -> Optional[Dict[str, Any]]:
        doc = self.repo.find_by_id(run_id)
        if doc is None:
            return None
        progress = doc.get("progress")
        if not isinstance(progress, dict):
            progress = {}
        try:
            IndexingRun.model_validate(doc)
            schema_issues: List[str] = []
        except ValidationError as exc:
            schema_issues = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
            ]
            logger.warning("Run %s does not match the stored schema issues=%d", run_id, len(schema_issues))
        return {
            "run": doc,
            "metrics": run_metrics(progress, doc.get("status")),
            "invariantViolations": invariant_violations(progress),
            "schemaIssues": schema_issues,
        }

    def metrics(self, filters: DashboardFilters) -> Dict[str, Any]:
        m = self.repo.aggregated_metrics(filters) or dict(EMPTY_METRICS)
        m["successRate"] = round(m.get("successRate") or 0, 2)
        m["averageProcessingTime"] = m.get("averageProcessingTime") or 0
        logger.info("Dashboard metrics totalLogs=%s successRate=%s", m.get("totalLogs"), m["successRate"])
        return m

    def time_series(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        rows = self.repo.time_series(filters)
        for r in rows:
            total = r.get("totalJobs") or 0
            r["successRate"] = round((r.get("successfulJobs") or 0) / total * 100, 2) if total else 0
            r["failureRate"] = round((r.get("failedJobs") or 0) / total * 100, 2) if total else 0
        return rows

    def performance_trends(self, days: int = TREND_DAYS, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        rows = self.repo.performance_trends(to_iso(since))
        previous = None
        for r in rows:
            r["avgSuccessRate"] = round(r.get("avgSuccessRate") or 0, 2)
            r["dayOverDayChange"] = 0 if previous is None else day_over_day_change(r["avgSuccessRate"], previous)
            previous = r["avgSuccessRate"]
        logger.info("Performance trends days=%d points=%d", days, len(rows))
        return rows

    def data_quality(self, filters: DashboardFilters) -> Dict[str, int]:
        m = self.metrics(filters)
        records = m.get("totalRecords") or 0
        clients = m.get("activeClients") or 0
        logs = m.get("totalLogs") or 0
        completeness = round_half_up((m.get("totalJobsIndexed") or 0) / records * 100) if records else 0
        accuracy = round_half_up(m.get("successRate") or 0)
        consistency = min(100, round_half_up(logs / clients * 2)) if clients and logs else 0
        scores = (completeness, accuracy, consistency, TIMELINESS_SCORE)
        return {
            "completeness": completeness,
            "accuracy": accuracy,
            "consistency": consistency,
            "timeliness": TIMELINESS_SCORE,
            "overall": round_half_up(sum(scores) / len(scores)),
        }

    def client_performance(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        rows = self.repo.client_performance(filters)
        for r in rows:
            r["successRate"] = round(r.get("successRate") or 0, 2)
            r["performanceRating"] = performance_rating(r["successRate"], r.get("totalJobs") or 0)
            # Single-window aggregate; there is no earlier window to compare against.
            r["trend"] = "stable"
        return rows

    def status_distribution(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        rows = self.repo.status_distribution(filters)
        total = sum(r.get("count", 0) for r in rows)
        out = []
        for r in rows:
            name, color = STATUS_STYLES.get(r.get("status"), UNKNOWN_STYLE)
            out.append({
                "name": name,
                "value": r.get("count", 0),
                "color": color,
                "percentage": round(r.get("count", 0) / total * 100, 2) if total else 0,
            })
        return out

    def top_performers(self, limit: int = 10) -> List[Dict[str, Any]]:
        rows = self.repo.top_performers(limit)
        for rank, r in enumerate(rows, start=1):
            r["successRate"] = round(r.get("successRate") or 0, 2)
            r["rank"] = rank
            r["performanceGrade"] = performance_grade(r["successRate"])
        return rows

    def failure_analysis(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        rows = self.repo.failure_analysis(filters)
        for r in rows:
            for key in ("filterLossRate", "indexFailureRate", "metadataMissingRate"):
                r[key] = round(r.get(key) or 0, 2)
            r["severity"] = failure_severity(r["indexFailureRate"], r["metadataMissingRate"], r["filterLossRate"])
            r["recommendations"] = recommendations(r)
        return rows

    def performance_alerts(self, min_success_rate: float = 90, min_job_volume: int = 100) -> List[Dict[str, Any]]:
        alerts: List[Dict[str, Any]] = []
        for c in self.repo.client_performance(DashboardFilters()):
            rate = c.get("successRate") or 0
            jobs = c.get("totalJobs") or 0
            if rate < min_success_rate:
                alerts.append({
                    "type": "low_success_rate",
                    "severity": "high",
                    "client": c.get("client"),
                    "message": f"Success rate ({rate:.1f}%) below threshold ({min_success_rate:g}%)",
                    "value": rate,
                    "threshold": min_success_rate,
                })
            if jobs < min_job_volume:
                alerts.append({
                    "type": "low_volume",
                    "severity": "medium",
                    "client": c.get("client"),
                    "message": f"Job volume ({jobs}) below expected threshold ({min_job_volume})",
                    "value": jobs,
                    "threshold": min_job_volume,
                })
        logger.info("Performance alerts generated count=%d", len(alerts))
        return alerts

    def client_stats(self, client: str) -> Optional[Dict[str, Any]]:
        stats = self.repo.client_stats(client)
        if stats is None:
            return None
        total = stats.get("totalJobs") or 0
        rate = round((stats.get("successfulJobs") or 0) / total * 100, 2) if total else 0
        stats["client"] = client
        stats["successRate"] = rate
        stats["performanceGrade"] = performance_grade(rate)
        return stats

    def clients(self) -> List[str]:
        return self.repo.unique_clients()

    def countries(self) -> List[str]:
        return self.repo.unique_countries()
