# indexing_insights/core/indexing_repository.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING
from pymongo.collection import Collection

from indexing_insights.core.aggregation_executor import json_safe
from indexing_insights.core.filters import build_match_stage
from indexing_insights.core.models import DashboardFilters

SUCCESSFUL_JOBS = {"$subtract": ["$progress.TOTAL_JOBS_IN_FEED", "$progress.TOTAL_JOBS_FAIL_INDEXED"]}

DATE_FORMATS = {
    "hourly": "%Y-%m-%d %H:00:00",
    "daily": "%Y-%m-%d",
    "weekly": "%Y-W%U",
}


def percent(numerator: Any, denominator: str) -> Dict[str, Any]:
    """$cond guarding against a zero denominator, scaled to 0..100."""
    return {
        "$cond": [
            {"$eq": [denominator, 0]},
            0,
            {"$multiply": [{"$divide": [numerator, denominator]}, 100]},
        ]
    }


class IndexingRunRepository:
    """Read-only aggregations over the indexing-run collection."""

    def __init__(self, collection: Collection, max_time_ms: int = 20000):
        self.collection = collection
        self.max_time_ms = max_time_ms

    def _aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [json_safe(d) for d in self.collection.aggregate(pipeline, maxTimeMS=self.max_time_ms)]

    def find_by_id(self, run_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collection.find_one({"_id": run_id})
        return json_safe(doc) if doc is not None else None

    def find_many(self, filters: DashboardFilters, page: int = 1, limit: int = 50) -> Tuple[List[Dict[str, Any]], int]:
        match = build_match_stage(filters)
        cursor = (
            self.collection.find(match)
            .sort("timestamp", DESCENDING)
            .skip((page - 1) * limit)
            .limit(limit)
            .max_time_ms(self.max_time_ms)
        )
        data = [json_safe(d) for d in cursor]
        total = self.collection.count_documents(match, maxTimeMS=self.max_time_ms)
        return data, total

    def aggregated_metrics(self, filters: DashboardFilters) -> Optional[Dict[str, Any]]:
        rows = self._aggregate([
            {"$match": build_match_stage(filters)},
            {"$group": {
                "_id": None,
                "totalLogs": {"$sum": 1},
                "totalJobsIndexed": {"$sum": "$progress.TOTAL_JOBS_SENT_TO_INDEX"},
                "totalJobsFailed": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "totalJobsInFeed": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "totalRecords": {"$sum": "$progress.TOTAL_RECORDS_IN_FEED"},
                "activeClients": {"$addToSet": "$transactionSourceName"},
            }},
            {"$project": {
                "_id": 0,
                "totalLogs": 1,
                "totalJobsIndexed": 1,
                "totalJobsFailed": 1,
                "totalRecords": 1,
                "successRate": percent({"$subtract": ["$totalJobsInFeed", "$totalJobsFailed"]}, "$totalJobsInFeed"),
                "averageProcessingTime": {"$literal": 0},
                "activeClients": {"$size": "$activeClients"},
            }},
        ])
        return rows[0] if rows else None

    def client_performance(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        # Every client is returned for comparison, so the client filter is ignored.
        return self._aggregate([
            {"$match": build_match_stage(filters, include_client=False)},
            {"$group": {
                "_id": "$transactionSourceName",
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "successfulJobs": {"$sum": SUCCESSFUL_JOBS},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "totalTransactions": {"$sum": 1},
                "totalRecords": {"$sum": "$progress.TOTAL_RECORDS_IN_FEED"},
                "lastTransaction": {"$max": "$timestamp"},
            }},
            {"$project": {
                "_id": 0,
                "client": "$_id",
                "totalJobs": 1,
                "successfulJobs": 1,
                "failedJobs": 1,
                "totalTransactions": 1,
                "totalRecords": 1,
                "lastTransaction": 1,
                "successRate": percent("$successfulJobs", "$totalJobs"),
                "averageJobsPerTransaction": {
                    "$cond": [{"$eq": ["$totalTransactions", 0]}, 0, {"$divide": ["$totalJobs", "$totalTransactions"]}]
                },
            }},
            {"$sort": {"totalJobs": -1}},
        ])

    def time_series(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        fmt = DATE_FORMATS.get(filters.granularity or "daily", DATE_FORMATS["daily"])
        return self._aggregate([
            {"$match": build_match_stage(filters)},
            {"$group": {
                "_id": {"$dateToString": {"format": fmt, "date": {"$dateFromString": {"dateString": "$timestamp"}}}},
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "successfulJobs": {"$sum": SUCCESSFUL_JOBS},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "transactionCount": {"$sum": 1},
            }},
            {"$project": {
                "_id": 0,
                "timestamp": "$_id",
                "totalJobs": 1,
                "successfulJobs": 1,
                "failedJobs": 1,
                "transactionCount": 1,
                "client": {"$literal": filters.client},
            }},
            {"$sort": {"timestamp": 1}},
        ])

    def performance_trends(self, since: str) -> List[Dict[str, Any]]:
        """Daily totals and mean per-run success rate for runs at or after `since` (ISO-8601)."""
        return self._aggregate([
            {"$match": {"timestamp": {"$gte": since}}},
            {"$group": {
                "_id": {"$dateToString": {"format": DATE_FORMATS["daily"], "date": {"$dateFromString": {"dateString": "$timestamp"}}}},
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "successfulJobs": {"$sum": SUCCESSFUL_JOBS},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "avgSuccessRate": {"$avg": percent(SUCCESSFUL_JOBS, "$progress.TOTAL_JOBS_IN_FEED")},
            }},
            {"$project": {
                "_id": 0,
                "date": "$_id",
                "totalJobs": 1,
                "successfulJobs": 1,
                "failedJobs": 1,
                "avgSuccessRate": 1,
            }},
            {"$sort": {"date": 1}},
        ])

    def status_distribution(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        return self._aggregate([
            {"$match": build_match_stage(filters)},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
            {"$project": {"_id": 0, "status": "$_id", "count": 1}},
            {"$sort": {"count": -1}},
        ])

    def top_performers(self, limit: int = 10) -> List[Dict[str, Any]]:
        return self._aggregate([
            {"$match": {"status": "completed"}},
            {"$group": {
                "_id": "$transactionSourceName",
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "successfulJobs": {"$sum": SUCCESSFUL_JOBS},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "totalTransactions": {"$sum": 1},
                "lastTransaction": {"$max": "$timestamp"},
            }},
            {"$project": {
                "_id": 0,
                "client": "$_id",
                "totalJobs": 1,
                "successfulJobs": 1,
                "failedJobs": 1,
                "totalTransactions": 1,
                "lastTransaction": 1,
                "successRate": percent("$successfulJobs", "$totalJobs"),
            }},
            {"$sort": {"successRate": -1, "totalJobs": -1}},
            {"$limit": int(limit)},
        ])

    def failure_analysis(self, filters: DashboardFilters) -> List[Dict[str, Any]]:
        return self._aggregate([
            {"$match": build_match_stage(filters)},
            {"$group": {
                "_id": {"client": "$transactionSourceName", "country": "$country_code"},
                "totalRecords": {"$sum": "$progress.TOTAL_RECORDS_IN_FEED"},
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "jobsWithoutMetadata": {"$sum": "$progress.TOTAL_JOBS_DONT_HAVE_METADATA"},
                "transactionCount": {"$sum": 1},
            }},
            {"$project": {
                "_id": 0,
                "client": "$_id.client",
                "country": "$_id.country",
                "totalRecords": 1,
                "totalJobs": 1,
                "failedJobs": 1,
                "jobsWithoutMetadata": 1,
                "transactionCount": 1,
                "filterLossRate": percent({"$subtract": ["$totalRecords", "$totalJobs"]}, "$totalRecords"),
                "indexFailureRate": percent("$failedJobs", "$totalJobs"),
                "metadataMissingRate": percent("$jobsWithoutMetadata", "$totalJobs"),
            }},
            {"$match": {"$or": [
                {"indexFailureRate": {"$gt": 0}},
                {"metadataMissingRate": {"$gt": 10}},
                {"filterLossRate": {"$gt": 50}},
            ]}},
            {"$sort": {"indexFailureRate": -1}},
        ])

    def client_stats(self, client: str) -> Optional[Dict[str, Any]]:
        rows = self._aggregate([
            {"$match": {"transactionSourceName": client}},
            {"$group": {
                "_id": None,
                "totalLogs": {"$sum": 1},
                "totalJobs": {"$sum": "$progress.TOTAL_JOBS_IN_FEED"},
                "successfulJobs": {"$sum": SUCCESSFUL_JOBS},
                "failedJobs": {"$sum": "$progress.TOTAL_JOBS_FAIL_INDEXED"},
                "avgJobsSentToIndex": {"$avg": "$progress.TOTAL_JOBS_SENT_TO_INDEX"},
                "firstTransaction": {"$min": "$timestamp"},
                "lastTransaction": {"$max": "$timestamp"},
            }},
            {"$project": {"_id": 0}},
        ])
        return rows[0] if rows else None

    def unique_clients(self) -> List[str]:
        return sorted(str(c) for c in self.collection.distinct("transactionSourceName") if c)

    def unique_countries(self) -> List[str]:
        return sorted(str(c) for c in self.collection.distinct("country_code") if c)

    def ping(self) -> bool:
        self.collection.database.client.admin.command("ping")
        return True
