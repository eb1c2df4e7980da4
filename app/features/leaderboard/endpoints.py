from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import ScoringError
from app.features.leaderboard.schemas import LeaderboardResponse
from app.features.leaderboard.service import leaderboard_service

router = APIRouter(prefix="/scores", tags=["leaderboard"])


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    summary="Top learners by total points plus the caller's rank",
)
async def get_leaderboard(current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await leaderboard_service.get_leaderboard(student_id=current_user.id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)
