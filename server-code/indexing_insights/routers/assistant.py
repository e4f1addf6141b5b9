# indexing_insights/routers/assistant.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from indexing_insights.deps import assistant
from indexing_insights.core.assistant import AssistantService
from indexing_insights.core.models import AssistantRequest, AssistantResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/assistant", tags=["assistant"])


@router.post("", response_model=AssistantResponse, summary="Answer a question about indexing runs")
@router.post("/", response_model=AssistantResponse, include_in_schema=False)
def ask(body: Optional[AssistantRequest] = Body(None), service: AssistantService = Depends(assistant)):
    # A missing or non-string question is answered with a clarification, not a 422.
    response = service.handle_question(body.question if body is not None else None)
    status_code = 500 if response.type == "error" else 200
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
