import pytest

from indexing_insights.core.filters import build_match_stage, parse_filters, validate_filters
from indexing_insights.core.models import DashboardFilters


def test_parse_filters_normalises_values():
    f = parse_filters({
        "startDate": "2025-07-01",
        "endDate": "2025-07-15T10:30:00Z",
        "client": " Deal1 ",
        "country": "us",
        "status": "FAILED",
        "page": "2",
        "limit": "25",
        "granularity": "weekly",
    })

    assert f.startDate == "2025-07-01T00:00:00.000Z"
    assert f.endDate == "2025-07-15T10:30:00.000Z"
    assert f.client == "Deal1"
    assert f.country == "US"
    assert f.status == "failed"
    assert (f.page, f.limit, f.granularity) == (2, 25, "weekly")


@pytest.mark.parametrize(
    "params",
    [
        {"startDate": "not-a-date"},
        {"status": "exploded"},
        {"page": "0"},
        {"page": "abc"},
        {"limit": "5000"},
        {"limit": "-1"},
        {"granularity": "monthly"},
    ],
)
def test_parse_filters_drops_unusable_values(params):
    assert parse_filters(params) == DashboardFilters()


def test_match_stage():
    f = DashboardFilters(
        startDate="2025-07-01T00:00:00.000Z",
        endDate="2025-07-31T00:00:00.000Z",
        client="Deal1",
        country="us",
        status="Completed",
    )

    assert build_match_stage(f) == {
        "timestamp": {"$gte": "2025-07-01T00:00:00.000Z", "$lte": "2025-07-31T00:00:00.000Z"},
        "transactionSourceName": "Deal1",
        "country_code": "US",
        "status": "completed",
    }
    assert "transactionSourceName" not in build_match_stage(f, include_client=False)


def test_match_stage_with_only_one_bound():
    assert build_match_stage(DashboardFilters(endDate="2025-07-31T00:00:00.000Z")) == {
        "timestamp": {"$lte": "2025-07-31T00:00:00.000Z"}
    }
    assert build_match_stage(DashboardFilters()) == {}


def test_validate_filters_reports_every_problem():
    f = DashboardFilters(
        startDate="2025-08-01T00:00:00.000Z",
        endDate="2024-01-01T00:00:00.000Z",
        client="Ghost",
        country="ZZ",
    )

    errors = validate_filters(f, known_clients=["Deal1"], known_countries=["US"])

    assert errors == [
        "Start date cannot be after end date",
        "Client 'Ghost' does not exist",
        "Country 'ZZ' does not exist",
    ]


def test_validate_filters_range_limit():
    f = DashboardFilters(startDate="2024-01-01T00:00:00.000Z", endDate="2025-07-01T00:00:00.000Z")

    assert validate_filters(f) == ["Date range cannot exceed 365 days"]


def test_validate_filters_accepts_known_values():
    f = DashboardFilters(client="Deal1", country="US", status="completed")

    assert validate_filters(f, ["Deal1"], ["US"]) == []
