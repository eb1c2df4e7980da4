from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import ScoringError
from app.features.progress.schemas import ProgressResponse
from app.features.progress.service import progress_service

router = APIRouter(prefix="/scores", tags=["progress"])


@router.get("/my-progress", response_model=ProgressResponse, summary="Point totals for the current learner")
async def get_my_progress(current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await progress_service.get_progress(student_id=current_user.id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)
