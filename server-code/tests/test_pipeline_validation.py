import pytest

from indexing_insights.core.pipeline_validation import (
    MalformedQueryError,
    PipelineValidationError,
    ValidatedPipeline,
    looks_like_pipeline,
    stage_issues,
    validate_pipeline,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("[]", True),
        ('  [{"$limit": 1}]\n', True),
        ('{"$limit": 1}', False),
        ("```json\n[]\n```", False),
        ("", False),
        (None, False),
    ],
)
def test_looks_like_pipeline(raw, expected):
    assert looks_like_pipeline(raw) is expected


def test_valid_pipeline():
    raw = """
    [
      {"$match": {"transactionSourceName": "Deal1", "timestamp": {"$gte": "2025-06-01T00:00:00.000Z", "$lt": "2025-07-01T00:00:00.000Z"}}},
      {"$group": {"_id": null, "avgSuccessRate": {"$avg": {"$multiply": [{"$divide": [{"$subtract": ["$progress.TOTAL_JOBS_IN_FEED", "$progress.TOTAL_JOBS_FAIL_INDEXED"]}, "$progress.TOTAL_JOBS_IN_FEED"]}, 100]}}}},
      {"$project": {"_id": 0, "avgSuccessRate": 1}},
      {"$sort": {"avgSuccessRate": -1}},
      {"$limit": 10}
    ]
    """

    pipeline = validate_pipeline(raw)

    assert isinstance(pipeline, ValidatedPipeline)
    assert [next(iter(s)) for s in pipeline.stages] == ["$match", "$group", "$project", "$sort", "$limit"]
    assert pipeline.text == raw.strip()
    assert pipeline.as_list()[4] == {"$limit": 10}


def test_not_an_array_is_a_validation_error():
    with pytest.raises(PipelineValidationError) as exc:
        validate_pipeline('{"$match": {}}')
    assert exc.value.issues == ["Output is not a JSON array"]


def test_bad_json_is_malformed():
    with pytest.raises(MalformedQueryError):
        validate_pipeline("[{'$match': {}}]")


@pytest.mark.parametrize("stage", ["$out", "$merge", "$lookup", "$unionWith", "$addFields", "$facet"])
def test_stage_outside_whitelist_is_rejected(stage):
    with pytest.raises(PipelineValidationError) as exc:
        validate_pipeline(f'[{{"{stage}": {{}}}}]')
    assert stage in exc.value.issues[0]


@pytest.mark.parametrize(
    "raw",
    [
        "[]",
        "[1]",
        '[{"$match": {}, "$limit": 5}]',
        '[{}]',
    ],
)
def test_structural_problems_are_rejected(raw):
    with pytest.raises(PipelineValidationError):
        validate_pipeline(raw)


@pytest.mark.parametrize(
    "raw",
    [
        '[{"$match": {"$where": "true"}}]',
        '[{"$group": {"_id": null, "x": {"$accumulator": {}}}}]',
        '[{"$project": {"f": {"$function": {"body": "", "args": [], "lang": "js"}}}}]',
        '[{"$match": {"$expr": {"$gte": ["$timestamp", {"$dateSubtract": {"startDate": "$$NOW", "unit": "day", "amount": 7}}]}}}]',
        '[{"$match": {"$expr": {"$lt": ["$timestamp", "$$NOW"]}}}]',
        '[{"$project": {"t": "$$CLUSTER_TIME"}}]',
    ],
)
def test_forbidden_operators_anywhere_are_rejected(raw):
    with pytest.raises(PipelineValidationError):
        validate_pipeline(raw)


def test_stage_issues_collects_every_problem():
    issues = stage_issues([{"$out": "x"}, {"$match": {"$where": "1"}}, "nope"])

    assert len(issues) == 3


def test_stage_issues_on_non_list():
    assert stage_issues({"$match": {}}) == ["Pipeline must be a JSON array (got dict)"]
