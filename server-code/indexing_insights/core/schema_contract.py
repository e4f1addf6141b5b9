# indexing_insights/core/schema_contract.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

COLLECTION_NAME = "job_indexing_logs"
ID_FIELD = "_id"

STATUSES: Tuple[str, ...] = ("completed", "failed", "processing")

PROGRESS_METRICS: Tuple[str, ...] = (
    "TOTAL_RECORDS_IN_FEED",
    "TOTAL_JOBS_IN_FEED",
    "TOTAL_JOBS_FAIL_INDEXED",
    "TOTAL_JOBS_SENT_TO_ENRICH",
    "TOTAL_JOBS_DONT_HAVE_METADATA",
    "TOTAL_JOBS_SENT_TO_INDEX",
)

# Aggregation stages the assistant may emit.
ALLOWED_STAGES: Tuple[str, ...] = ("$match", "$group", "$project", "$sort", "$limit")

ISO_TIMESTAMP_FORMAT = "YYYY-MM-DDTHH:mm:ss.sssZ"


@dataclass(frozen=True)
class FieldSpec:
    path: str
    type: str
    notes: str = ""


FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("_id", "string", "required"),
    FieldSpec("country_code", "string", "required, uppercase, length 2-3"),
    FieldSpec("currency_code", "string", "required, uppercase, length 3, matches /^[A-Z]{3}$/"),
    FieldSpec("progress", "object", "required, nested counters below"),
    FieldSpec("progress.SWITCH_INDEX", "boolean", "default false"),
    FieldSpec("progress.TOTAL_RECORDS_IN_FEED", "number", "required, min 0"),
    FieldSpec("progress.TOTAL_JOBS_IN_FEED", "number", "required, min 0"),
    FieldSpec("progress.TOTAL_JOBS_FAIL_INDEXED", "number", "default 0, min 0"),
    FieldSpec("progress.TOTAL_JOBS_SENT_TO_ENRICH", "number", "default 0, min 0"),
    FieldSpec("progress.TOTAL_JOBS_DONT_HAVE_METADATA", "number", "default 0, min 0"),
    FieldSpec("progress.TOTAL_JOBS_DONT_HAVE_METADATA_V2", "number", "default 0, min 0"),
    FieldSpec("progress.TOTAL_JOBS_SENT_TO_INDEX", "number", "required, min 0"),
    FieldSpec("status", "string", "required, one of " + ", ".join(f'"{s}"' for s in STATUSES) + ", lowercase"),
    FieldSpec("timestamp", "string", "required, ISO 8601 date string (compare as strings)"),
    FieldSpec("transactionSourceName", "string", "required, trimmed; the client / source name"),
    FieldSpec("noCoordinatesCount", "number", "optional, default 0, min 0"),
    FieldSpec("recordCount", "number", "optional, default 0, min 0"),
    FieldSpec("uniqueRefNumberCount", "number", "optional, default 0, min 0"),
    FieldSpec("createdAt, updatedAt", "timestamps", "auto-managed"),
)


def render_schema(fields: Tuple[FieldSpec, ...] = FIELDS) -> str:
    """
    Returns the collection schema as an indented bullet list, e.g.:

    - country_code: string (required, uppercase, length 2-3)
    - progress: object (required, nested counters below)
      - TOTAL_JOBS_IN_FEED: number (required, min 0)
    """
    lines = []
    for f in fields:
        depth = f.path.count(".") if not f.path.startswith("createdAt") else 0
        name = f.path.rsplit(".", 1)[-1] if depth else f.path
        suffix = f" ({f.notes})" if f.notes else ""
        lines.append(f"{'  ' * depth}- {name}: {f.type}{suffix}")
    return "\n".join(lines)
