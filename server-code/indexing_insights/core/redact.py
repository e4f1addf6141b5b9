from __future__ import annotations
import re

API_KEY_RE = re.compile(r"(key=)([^&\s]+)", re.I)
URI_CREDENTIALS_RE = re.compile(r"(mongodb(?:\+srv)?://)([^@/\s]+)@", re.I)
LONG_TOKEN_RE = re.compile(r"[A-Za-z0-9_\-]{24,}")
# Upper snake-case names such as TOTAL_JOBS_SENT_TO_INDEX are schema fields, not secrets.
FIELD_NAME_RE = re.compile(r"[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)+")


def _mask_token(m: re.Match) -> str:
    token = m.group(0)
    return token if FIELD_NAME_RE.fullmatch(token) else "***"


def redact(s: str) -> str:
    out = API_KEY_RE.sub(r"\1***REDACTED***", s)
    out = URI_CREDENTIALS_RE.sub(r"\1***@", out)
    # Heuristic: mask long tokens
    out = LONG_TOKEN_RE.sub(_mask_token, out)
    return out
