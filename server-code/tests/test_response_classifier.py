import pytest

from indexing_insights.core.response_classifier import (
    AGGREGATE_KEYWORDS,
    CHART_KEYWORDS,
    RANKING_KEYWORDS,
    TABLE_KEYWORDS,
    ClassifierPolicy,
    ResponseType,
    classify,
    has_positive_numeric,
    is_aggregate_result,
)


def rows(n, **extra):
    return [{"client": f"Deal{i}", "totalJobs": (i + 1) * 10, **extra} for i in range(n)]


def test_keyword_lists_are_fixed():
    assert AGGREGATE_KEYWORDS == ("total", "count", "average", "sum", "jobs")
    assert TABLE_KEYWORDS == ("table", "list", "show me", "display")
    assert CHART_KEYWORDS == ("chart", "graph", "plot", "visualize", "trends", "compare")
    assert RANKING_KEYWORDS == ("compare", "top", "best", "most", "highest", "lowest")


@pytest.mark.parametrize("key", ["totalJobs", "recordCount", "averageRate", "sumOfRecords", "jobsFailed", "TOTAL_JOBS_SENT_TO_INDEX"])
def test_single_aggregate_row_is_text(key):
    decision = classify("show me a chart of this", [{key: 12}])

    assert decision.response_type is ResponseType.TEXT
    assert decision.reason == "aggregate"


def test_single_plain_row_is_text_even_when_chart_requested():
    decision = classify("plot the client", [{"client": "Deal1"}])

    assert decision.response_type is ResponseType.TEXT
    assert decision.reason == "default"


def test_chart_word_beats_table_word():
    decision = classify("show me a chart of clients", rows(3))

    assert decision.response_type is ResponseType.CHART
    assert decision.reason == "chart requested"


@pytest.mark.parametrize("question", ["display clients", "List the clients", "put it in a TABLE"])
def test_table_words_give_a_table(question):
    assert classify(question, rows(3)).response_type is ResponseType.TABLE


def test_ranking_words_with_positive_numbers_give_a_chart():
    decision = classify("which clients have the highest volume", rows(5))

    assert decision.response_type is ResponseType.CHART
    assert decision.reason == "comparison detected"


def test_ranking_words_without_positive_numbers_give_a_table():
    data = [{"client": "Deal1", "failed": 0, "ok": True}, {"client": "Deal2", "failed": -1, "ok": False}]

    decision = classify("top clients", data)

    assert decision.response_type is ResponseType.TABLE
    assert decision.reason == "list result"


def test_list_without_keywords_is_a_table():
    assert classify("clients by volume", rows(4)).response_type is ResponseType.TABLE


def test_exactly_threshold_rows_still_honours_chart_request():
    decision = classify("chart clients", rows(50))

    assert decision.response_type is ResponseType.CHART
    assert len(decision.rows) == 50


def test_above_threshold_is_cut_to_summary_text():
    decision = classify("chart clients", rows(51))

    assert decision.response_type is ResponseType.TEXT
    assert decision.reason == "large result"
    assert decision.rows == rows(51)[:5]


def test_custom_policy():
    policy = ClassifierPolicy(large_result_threshold=3, summary_size=1)

    decision = classify("chart clients", rows(4), policy)

    assert decision.response_type is ResponseType.TEXT
    assert len(decision.rows) == 1


def test_classify_is_deterministic_and_does_not_mutate_input():
    data = rows(6)
    snapshot = [dict(r) for r in data]

    first = classify("compare clients", data)
    second = classify("compare clients", data)

    assert first == second
    assert data == snapshot
    first.rows[0]["client"] = "changed"
    assert data[0]["client"] == "Deal0"


def test_helpers():
    assert is_aggregate_result([{"count": 1}])
    assert not is_aggregate_result([{"count": 1}, {"count": 2}])
    assert not is_aggregate_result([{"client": "Deal1"}])
    assert has_positive_numeric([{"a": 0}, {"b": 0.5}])
    assert not has_positive_numeric([{"a": True}, {"b": "12"}])
