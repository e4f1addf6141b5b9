# indexing_insights/routers/dashboard.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from indexing_insights.deps import dashboard
from indexing_insights.core.dashboard_service import TREND_DAYS, DashboardService
from indexing_insights.core.filters import parse_filters
from indexing_insights.core.models import DashboardFilters

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
lookups = APIRouter(prefix="/api", tags=["dashboard"])


def _server_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def _invalid(errors) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": "Invalid filters", "details": errors})


def _filtered(request: Request, service: DashboardService, fn: Callable[[DashboardFilters], Any], *, wrap: bool = True):
    filters = parse_filters(request.query_params)
    try:
        errors = service.validate(filters)
        if errors:
            return _invalid(errors)
        result = fn(filters)
    except Exception as exc:
        logger.exception("Dashboard query failed (%s): %s", request.url.path, exc)
        return _server_error()
    return {"success": True, "data": result} if wrap else result


def _plain(request: Request, fn: Callable[[], Any]):
    try:
        return {"success": True, "data": fn()}
    except Exception as exc:
        logger.exception("Dashboard query failed (%s): %s", request.url.path, exc)
        return _server_error()


@router.get("", summary="Paginated indexing-run logs")
def logs(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.logs, wrap=False)


@router.get("/aggregated-metrics")
def aggregated_metrics(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.metrics)


@router.get("/time-series")
def time_series(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.time_series)


@router.get("/clients")
def client_performance(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.client_performance)


@router.get("/status")
def status_distribution(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.status_distribution)


@router.get("/failure-analysis")
def failure_analysis(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.failure_analysis)


@router.get("/performance-trends", summary="Daily success-rate trend with day-over-day change")
def performance_trends(request: Request, days: Optional[str] = None, service: DashboardService = Depends(dashboard)):
    try:
        n = int(days) if days is not None else TREND_DAYS
    except ValueError:
        n = 0
    if not 1 <= n <= 365:
        return JSONResponse(status_code=400, content={"success": False, "error": "Days parameter must be between 1 and 365"})
    return _plain(request, lambda: service.performance_trends(n))


@router.get("/data-quality")
def data_quality(request: Request, service: DashboardService = Depends(dashboard)):
    return _filtered(request, service, service.data_quality)


@router.get("/top-performers")
def top_performers(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
    service: DashboardService = Depends(dashboard),
):
    return _plain(request, lambda: service.top_performers(limit))


@router.get("/performance-alerts")
def performance_alerts(
    request: Request,
    minSuccessRate: float = Query(90, ge=0, le=100),
    minJobVolume: int = Query(100, ge=0),
    service: DashboardService = Depends(dashboard),
):
    return _plain(request, lambda: service.performance_alerts(minSuccessRate, minJobVolume))


@router.get("/client/{client_name}/stats")
def client_stats(request: Request, client_name: str, service: DashboardService = Depends(dashboard)):
    try:
        stats = service.client_stats(client_name)
    except Exception as exc:
        logger.exception("Client stats failed for %s: %s", client_name, exc)
        return _server_error()
    if stats is None:
        return JSONResponse(status_code=404, content={"success": False, "error": f"Client '{client_name}' not found"})
    return {"success": True, "data": stats}


@router.get("/logs/{run_id}")
def run_detail(run_id: str, service: DashboardService = Depends(dashboard)):
    try:
        detail = service.run_detail(run_id)
    except Exception as exc:
        logger.exception("Run detail failed for %s: %s", run_id, exc)
        return _server_error()
    if detail is None:
        return JSONResponse(status_code=404, content={"success": False, "error": f"Run '{run_id}' not found"})
    return {"success": True, "data": detail}


@lookups.get("/clients", summary="Distinct client names for filter dropdowns")
def clients(request: Request, service: DashboardService = Depends(dashboard)):
    return _plain(request, service.clients)


@lookups.get("/countries", summary="Distinct country codes for filter dropdowns")
def countries(request: Request, service: DashboardService = Depends(dashboard)):
    return _plain(request, service.countries)
