# indexing_insights/core/pipeline_validation.py
from __future__ import annotations
from dataclasses import dataclass
import json
from typing import Any, Dict, List, Tuple

from indexing_insights.core.schema_contract import ALLOWED_STAGES

# Operators that run server-side JavaScript or compute dates at query time.
FORBIDDEN_OPERATORS = frozenset({
    "$where", "$function", "$accumulator",
    "$dateSubtract", "$dateAdd", "$dateTrunc",
})
FORBIDDEN_VARIABLES = ("$$NOW", "$$CLUSTER_TIME")


class MalformedQueryError(Exception):
    """Generated text looked like a pipeline but is not valid JSON."""


class PipelineValidationError(Exception):
    def __init__(self, issues: List[str]):
        super().__init__("; ".join(issues))
        self.issues = issues


@dataclass(frozen=True)
class ValidatedPipeline:
    """A pipeline that passed ``validate_pipeline``. Build it only through that function."""
    stages: Tuple[Dict[str, Any], ...]
    text: str

    def as_list(self) -> List[Dict[str, Any]]:
        return list(self.stages)


def looks_like_pipeline(raw: str) -> bool:
    s = (raw or "").strip()
    return s.startswith("[") and s.endswith("]")


def _walk(node: Any, path: str, issues: List[str]) -> None:
    if isinstance(node, dict):
        for k, v in node.items():
            if k in FORBIDDEN_OPERATORS:
                issues.append(f"Prohibited operator {k} at {path}")
            _walk(v, f"{path}.{k}", issues)
    elif isinstance(node, list):
        for i, v in enumerate(node):
            _walk(v, f"{path}[{i}]", issues)
    elif isinstance(node, str):
        if any(node.startswith(var) for var in FORBIDDEN_VARIABLES):
            issues.append(f"Prohibited variable {node} at {path}")


def stage_issues(stages: Any) -> List[str]:
    if not isinstance(stages, list):
        return [f"Pipeline must be a JSON array (got {type(stages).__name__})"]
    if not stages:
        return ["Pipeline is empty"]
    issues: List[str] = []
    for i, stage in enumerate(stages):
        if not isinstance(stage, dict) or len(stage) != 1:
            issues.append(f"Stage {i} must be an object with exactly one operator")
            continue
        name = next(iter(stage))
        if name not in ALLOWED_STAGES:
            issues.append(f"Stage {i} uses {name}; only {', '.join(ALLOWED_STAGES)} allowed")
            continue
        _walk(stage[name], f"[{i}].{name}", issues)
    return issues


def validate_pipeline(raw: str) -> ValidatedPipeline:
    s = (raw or "").strip()
    if not looks_like_pipeline(s):
        raise PipelineValidationError(["Output is not a JSON array"])
    try:
        stages = json.loads(s)
    except ValueError as e:
        raise MalformedQueryError(f"Pipeline is not valid JSON: {e}") from e
    issues = stage_issues(stages)
    if issues:
        raise PipelineValidationError(issues)
    return ValidatedPipeline(stages=tuple(stages), text=s)
