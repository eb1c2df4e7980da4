# app/features/coding/endpoints.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import ScoringError
from app.features.coding.schemas import CodingJudgeResponse, CodingSubmissionEnvelope, CodingSubmitRequest
from app.features.coding.service import coding_judge_service

router = APIRouter(prefix="/scores", tags=["coding"])


@router.post(
    "/coding-submit",
    response_model=CodingJudgeResponse,
    summary="Judge a coding submission and store the verdict",
    description=(
        "Web challenges are judged from the browser's test-script results; every other "
        "language is executed once per test case on the execution service. The verdict "
        "replaces any previous submission for the topic."
    ),
)
async def submit_coding(payload: CodingSubmitRequest, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return await coding_judge_service.judge_submission(
            student_id=current_user.id,
            topic_id=payload.topic_id,
            code=payload.code,
            language=payload.language,
            client_test_results=payload.test_results,
        )
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)


@router.get("/coding-submission/{topic_id}", response_model=CodingSubmissionEnvelope)
async def get_coding_submission(topic_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        submission = await coding_judge_service.get_submission(student_id=current_user.id, topic_id=topic_id)
    except ScoringError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code)
    return CodingSubmissionEnvelope(submission=submission)
