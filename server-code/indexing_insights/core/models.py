from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from indexing_insights.core.response_classifier import ResponseType


class AssistantRequest(BaseModel):
    question: Any = None


class SuccessResponse(BaseModel):
    type: Literal["success"] = "success"
    message: str
    data: List[Dict[str, Any]] = Field(default_factory=list)
    # The pipeline that was executed, as parsed JSON.
    query: List[Dict[str, Any]] = Field(default_factory=list)
    responseType: ResponseType = ResponseType.TEXT


class ClarificationResponse(BaseModel):
    type: Literal["clarification"] = "clarification"
    message: str
    suggestions: List[str] = Field(default_factory=list)


class UnsupportedResponse(BaseModel):
    type: Literal["unsupported"] = "unsupported"
    message: str
    suggestions: List[str] = Field(default_factory=list)


class NoDataResponse(BaseModel):
    type: Literal["no_data"] = "no_data"
    message: str
    hint: str


class ErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    message: str
    hint: str


AssistantResponse = Annotated[
    Union[SuccessResponse, ClarificationResponse, UnsupportedResponse, NoDataResponse, ErrorResponse],
    Field(discriminator="type"),
]


def performance_level(success_rate: float) -> str:
    if success_rate >= 95:
        return "excellent"
    if success_rate >= 90:
        return "good"
    if success_rate >= 80:
        return "fair"
    if success_rate >= 70:
        return "poor"
    return "critical"


def _counter(progress: Mapping[str, Any], name: str) -> float:
    value = progress.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def run_metrics(progress: Mapping[str, Any], status: Any) -> Dict[str, Any]:
    """Per-run rates computed from a raw progress mapping; missing or non-numeric counters count as 0."""
    records = _counter(progress, "TOTAL_RECORDS_IN_FEED")
    jobs = _counter(progress, "TOTAL_JOBS_IN_FEED")
    failed = _counter(progress, "TOTAL_JOBS_FAIL_INDEXED")
    sent_to_index = _counter(progress, "TOTAL_JOBS_SENT_TO_INDEX")

    def pct(num: float, den: float) -> float:
        return round(num / den * 100, 2) if den else 0

    success_rate = pct(jobs - failed, jobs)
    return {
        "successRate": success_rate,
        "enrichmentRate": pct(_counter(progress, "TOTAL_JOBS_SENT_TO_ENRICH"), jobs),
        "filteringRate": pct(jobs, records),
        "indexSuccessRate": pct(sent_to_index, jobs),
        "metadataCoverage": pct(jobs - _counter(progress, "TOTAL_JOBS_DONT_HAVE_METADATA"), jobs),
        "processingEfficiency": pct(sent_to_index, records),
        "performanceLevel": performance_level(success_rate),
        "isHealthy": status == "completed" and success_rate >= 90,
    }


def invariant_violations(progress: Mapping[str, Any]) -> List[str]:
    # Enforced by ingestion; reported here for diagnostics only.
    records = _counter(progress, "TOTAL_RECORDS_IN_FEED")
    jobs = _counter(progress, "TOTAL_JOBS_IN_FEED")
    issues: List[str] = []
    if jobs > records:
        issues.append("TOTAL_JOBS_IN_FEED cannot be greater than TOTAL_RECORDS_IN_FEED")
    if _counter(progress, "TOTAL_JOBS_SENT_TO_INDEX") > jobs:
        issues.append("TOTAL_JOBS_SENT_TO_INDEX cannot be greater than TOTAL_JOBS_IN_FEED")
    return issues


class Progress(BaseModel):
    SWITCH_INDEX: bool = False
    TOTAL_RECORDS_IN_FEED: int = Field(ge=0)
    TOTAL_JOBS_IN_FEED: int = Field(ge=0)
    TOTAL_JOBS_FAIL_INDEXED: int = Field(default=0, ge=0)
    TOTAL_JOBS_SENT_TO_ENRICH: int = Field(default=0, ge=0)
    TOTAL_JOBS_DONT_HAVE_METADATA: int = Field(default=0, ge=0)
    TOTAL_JOBS_DONT_HAVE_METADATA_V2: Optional[int] = Field(default=None, ge=0)
    TOTAL_JOBS_SENT_TO_INDEX: int = Field(ge=0)


class IndexingRun(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    country_code: str = Field(pattern=r"^[A-Z]{2,3}$")
    currency_code: str = Field(pattern=r"^[A-Z]{3}$")
    progress: Progress
    status: Literal["completed", "failed", "processing"]
    timestamp: str
    transactionSourceName: str
    noCoordinatesCount: int = Field(default=0, ge=0)
    recordCount: int = Field(default=0, ge=0)
    uniqueRefNumberCount: int = Field(default=0, ge=0)


class DashboardFilters(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    client: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    granularity: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
