# indexing_insights/core/aggregation_executor.py
from __future__ import annotations
from datetime import date, datetime
from itertools import islice
from typing import Any, Dict, List, Union

from bson import Decimal128, ObjectId
from pymongo.collection import Collection

from indexing_insights.core.pipeline_validation import ValidatedPipeline, validate_pipeline


def json_safe(v: Any) -> Any:
    """Coerce BSON types into JSON-serializable values."""
    if isinstance(v, dict):
        return {k: json_safe(x) for k, x in v.items()}
    if isinstance(v, list):
        return [json_safe(x) for x in v]
    if isinstance(v, Decimal128):
        # Use float for analytics; switch to str if you need exact precision
        return float(v.to_decimal())
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return v


class ReadOnlyAggregationExecutor:
    def __init__(self, collection: Collection, max_documents: int, max_time_ms: int):
        self.collection = collection
        self.max_documents = max_documents
        self.max_time_ms = max_time_ms

    def execute(self, pipeline: Union[ValidatedPipeline, str]) -> List[Dict[str, Any]]:
        if isinstance(pipeline, str):
            pipeline = validate_pipeline(pipeline)
        if not isinstance(pipeline, ValidatedPipeline):
            raise TypeError("execute() requires a ValidatedPipeline")
        cursor = self.collection.aggregate(pipeline.as_list(), maxTimeMS=int(self.max_time_ms))
        try:
            return [json_safe(doc) for doc in islice(cursor, int(self.max_documents))]
        finally:
            cursor.close()
