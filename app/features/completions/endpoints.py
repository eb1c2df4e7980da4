from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import ScoringError
from app.features.completions.schemas import CompletionOut, CompletionRequest, CompletionsResponse
from app.features.completions.service import completions_service

router = APIRouter(prefix="/scores", tags=["completions"])


@router.post("/complete", response_model=CompletionOut, summary="Mark a topic item as completed")
async def mark_complete(payload: CompletionRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await completions_service.mark_complete(
            student_id=current_user.id, topic_id=payload.topic_id, item_type=payload.item_type
        )
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)


@router.get("/completions", response_model=CompletionsResponse, summary="Completed items per topic")
async def get_completions(
    course_id: Optional[str] = Query(default=None),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return await completions_service.get_completions(student_id=current_user.id, course_id=course_id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)
