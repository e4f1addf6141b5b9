import pytest

from indexing_insights.core.response_classifier import ResponseType, ShapeDecision
from indexing_insights.core.response_formatter import (
    format_as_chart,
    format_as_table,
    format_as_text,
    format_average,
    format_decision,
    format_number,
    humanize_field,
    strip_identifier,
)


@pytest.mark.parametrize(
    "key,expected",
    [
        ("totalJobs", "Total Jobs"),
        ("country_code", "Country code"),
        ("TOTAL_JOBS_SENT_TO_INDEX", "TOTAL JOBS SENT TO INDEX"),
        ("successRate", "Success Rate"),
        ("clientId", "Client Id"),
        ("client", "Client"),
    ],
)
def test_humanize_field(key, expected):
    assert humanize_field(key) == expected


def test_humanize_field_upper_id_only_touches_whole_word():
    assert humanize_field("clientId", upper_id=True) == "Client ID"
    assert humanize_field("Identifier", upper_id=True) == "Identifier"


@pytest.mark.parametrize(
    "value,expected",
    [
        (125000, "125,000"),
        (3.0, "3"),
        (12.5, "12.5"),
        (1234.5678, "1,234.568"),
        (0, "0"),
        (True, "True"),
        ("Deal1", "Deal1"),
        (None, "N/A"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_average():
    assert format_average(97.456) == "97.46"
    assert format_average(1234.5) == "1234.50"
    assert format_average("n/a") == "n/a"
    assert format_average(None) == "N/A"


def test_single_total_value():
    out = format_as_text("total jobs?", [{"_id": None, "TOTAL_JOBS_SENT_TO_INDEX": 125000}])

    assert out.message == 'Based on your query "total jobs?", the **TOTAL JOBS SENT TO INDEX** is **125,000**.'
    assert out.data == [{"TOTAL_JOBS_SENT_TO_INDEX": 125000}]
    assert out.response_type is ResponseType.TEXT


def test_single_value_priority_prefers_total_over_count():
    out = format_as_text("q", [{"recordCount": 3, "totalRecords": 10}])

    assert "**Total Records** is **10**" in out.message


def test_single_average_uses_two_decimals():
    out = format_as_text("avg?", [{"avgSuccessRate": 97.456}])

    assert "**Avg Success Rate** is **97.46**" in out.message


def test_single_row_falls_back_to_first_meaningful_field():
    out = format_as_text("who?", [{"_id": "abc", "client": "Deal1", "currency_code": "USD"}])

    assert "**Client** is **Deal1**" in out.message
    assert out.data == [{"client": "Deal1", "currency_code": "USD"}]


def test_single_row_with_only_identifier():
    out = format_as_text("ids?", [{"_id": "abc"}])

    assert out.message.startswith('Here\'s what I found for "ids?"')
    assert out.data == [{}]


def test_list_summary_numbers_lines_and_reports_remainder():
    data = [{"_id": i, "client": f"Deal{i}", "totalJobs": 1000 * i} for i in range(1, 8)]

    out = format_as_text("clients", data)

    assert out.message.startswith('I found **7** results for "clients":')
    assert "1. **Deal1** - 1,000" in out.message
    assert "5. **Deal5** - 5,000" in out.message
    assert "6. **Deal6**" not in out.message
    assert out.message.endswith("... and 2 more results. Ask for a table to see more!")
    assert len(out.data) == 5


def test_summary_of_truncated_rows_reports_the_full_total():
    data = [{"client": f"Deal{i}"} for i in range(5)]

    out = format_as_text("list all", data, total=80)

    assert "**80**" in out.message
    assert "75 more results" in out.message


def test_single_null_value_reads_as_not_available():
    out = format_as_text("average jobs?", [{"_id": None, "averageJobs": None}])

    assert out.message == 'Based on your query "average jobs?", the **Average Jobs** is **N/A**.'
    assert "None" not in out.message


def test_list_summary_renders_null_labels_as_not_available():
    out = format_as_text("by country", [{"country": None, "totalJobs": None}, {"country": "US", "totalJobs": 5}])

    assert "1. **N/A** - N/A" in out.message
    assert "2. **US** - 5" in out.message


def test_capped_summary_says_the_total_is_a_lower_bound():
    data = [{"client": f"Deal{i}"} for i in range(5)]

    out = format_as_text("list all", data, total=60, capped=True)

    assert out.message.startswith('I found at least **60** results for "list all" (the result set was capped):')
    assert "I found **60** results" not in out.message


def test_table_relabels_and_strips_identifier():
    data = [{"_id": "x", "clientId": 7, "totalJobs": 1}]

    out = format_as_table("table please", data)

    assert out.message == 'Here\'s a table showing the results for "table please":'
    assert out.data == [{"Client ID": 7, "Total Jobs": 1}]
    assert data == [{"_id": "x", "clientId": 7, "totalJobs": 1}]


def test_chart_keeps_key_order_without_id_upgrade():
    out = format_as_chart("chart", [{"_id": "x", "clientId": 7, "totalJobs": 1}])

    assert out.message == 'Here\'s a chart visualization for "chart":'
    assert list(out.data[0]) == ["Client Id", "Total Jobs"]
    assert out.response_type is ResponseType.CHART


def test_format_decision_dispatches_on_type():
    rows = [{"client": "Deal1", "totalJobs": 1}, {"client": "Deal2", "totalJobs": 2}]

    assert format_decision("q", ShapeDecision(ResponseType.TABLE, rows, "x"), total=2).response_type is ResponseType.TABLE
    assert format_decision("q", ShapeDecision(ResponseType.CHART, rows, "x"), total=2).response_type is ResponseType.CHART
    assert format_decision("q", ShapeDecision(ResponseType.TEXT, rows, "x"), total=2).response_type is ResponseType.TEXT


def test_strip_identifier_returns_a_copy():
    row = {"_id": 1, "a": 2}

    assert strip_identifier(row) == {"a": 2}
    assert row == {"_id": 1, "a": 2}
