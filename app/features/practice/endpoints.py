# app/features/practice/endpoints.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import ScoringError
from app.features.practice.schemas import (
    PracticeAttemptDetail,
    PracticeAttemptList,
    PracticeAttemptRequest,
    PracticeAttemptSummary,
)
from app.features.practice.service import practice_service

router = APIRouter(prefix="/scores", tags=["practice"])


@router.post(
    "/practice-attempt",
    response_model=PracticeAttemptSummary,
    summary="Score and record one MCQ practice attempt",
)
async def record_practice_attempt(payload: PracticeAttemptRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await practice_service.record_attempt(
            student_id=current_user.id,
            topic_id=payload.topic_id,
            answers=payload.answers,
            time_taken_seconds=payload.time_taken_seconds,
        )
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)


@router.get(
    "/practice-attempts/{topic_id}",
    response_model=PracticeAttemptList,
    summary="Attempt history for a topic, newest first",
)
async def list_practice_attempts(topic_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await practice_service.get_attempts(student_id=current_user.id, topic_id=topic_id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)


@router.get(
    "/practice-attempts/{topic_id}/{attempt_id}",
    response_model=PracticeAttemptDetail,
    summary="One attempt of a topic including the submitted answers",
)
async def get_practice_attempt_for_topic(
    topic_id: str, attempt_id: str, current_user: CurrentUser = Depends(get_current_user)
):
    try:
        return await practice_service.get_attempt_detail(
            student_id=current_user.id, attempt_id=attempt_id, topic_id=topic_id
        )
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)


@router.get(
    "/practice-attempt/{attempt_id}",
    response_model=PracticeAttemptDetail,
    summary="One attempt including the submitted answers",
)
async def get_practice_attempt(attempt_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await practice_service.get_attempt_detail(student_id=current_user.id, attempt_id=attempt_id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)
