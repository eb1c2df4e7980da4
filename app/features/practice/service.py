from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError as SchemaError

from app.common.errors import NotFoundError, ValidationError
from app.common.utils import parse_timestamp, parse_uuid
from app.features.practice.repository import practice_repository
from app.features.practice.schemas import (
    PracticeAnswer,
    PracticeAttemptDetail,
    PracticeAttemptList,
    PracticeAttemptSummary,
)

logger = logging.getLogger("practice")

PASS_PERCENTAGE = 80.0
_TWO_PLACES = Decimal("0.01")


def compute_percentage(correct: int, total: int) -> float:
    """Percentage of ``correct`` over ``total`` rounded half-up to 2 places."""
    if total <= 0:
        return 0.0
    value = (Decimal(correct) * 100 / Decimal(total)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(value)


def score_answers(answers: Sequence[PracticeAnswer]) -> Tuple[int, int, float, bool]:
    """Return (correct, total, percentage, passed) for a validated answer list."""
    total = len(answers)
    correct = sum(1 for answer in answers if answer.is_correct)
    percentage = compute_percentage(correct, total)
    return correct, total, percentage, percentage >= PASS_PERCENTAGE


def _coerce_answers(answers: Optional[Iterable[Any]]) -> List[PracticeAnswer]:
    if answers is None or isinstance(answers, (str, bytes, dict)):
        raise ValidationError("answers_required", "answers must be a non-empty list")
    answers = list(answers)
    if not answers:
        raise ValidationError("answers_required", "answers must be a non-empty list")
    cleaned: List[PracticeAnswer] = []
    for index, raw in enumerate(answers):
        if isinstance(raw, PracticeAnswer):
            cleaned.append(raw)
            continue
        if not isinstance(raw, dict):
            raise ValidationError("malformed_answers", f"answer {index} must be an object")
        try:
            cleaned.append(PracticeAnswer.model_validate(raw))
        except SchemaError as exc:
            raise ValidationError("malformed_answers", f"answer {index} is missing selectedOption or correctOption") from exc
    return cleaned


def _summary_from_row(row: Dict[str, Any]) -> PracticeAttemptSummary:
    return PracticeAttemptSummary(
        id=str(row.get("id")),
        topic_id=str(row["topic_id"]) if row.get("topic_id") is not None else None,
        attempt_number=int(row.get("attempt_number") or 0),
        score=int(row.get("score") or 0),
        total=int(row.get("total") or 0),
        percentage=float(row.get("percentage") or 0),
        passed=bool(row.get("passed")),
        time_taken_seconds=int(row.get("time_taken_seconds") or 0),
        created_at=parse_timestamp(row.get("created_at")),
    )


def _detail_from_row(row: Dict[str, Any]) -> PracticeAttemptDetail:
    summary = _summary_from_row(row)
    return PracticeAttemptDetail(**summary.model_dump(), answers=list(row.get("answers") or []))


class PracticeService:
    def __init__(self, repository=practice_repository):
        self.repository = repository

    async def record_attempt(
        self,
        *,
        student_id: str,
        topic_id: str,
        answers: Optional[Iterable[Any]],
        time_taken_seconds: Optional[int] = 0,
    ) -> PracticeAttemptSummary:
        """Score one MCQ attempt, append it to history and raise the best score.

        Numbering, the insert and the best-score upsert run as a single stored
        function, so a failed call writes nothing and concurrent calls for the
        same (student, topic) get consecutive numbers.
        """
        if not topic_id:
            raise ValidationError("topic_required", "topicId is required")
        topic = parse_uuid(topic_id)
        if topic is None:
            raise ValidationError("invalid_topic_id", "topicId must be a UUID")
        validated = _coerce_answers(answers)
        try:
            time_taken = max(0, int(time_taken_seconds or 0))
        except (TypeError, ValueError) as exc:
            raise ValidationError("invalid_time_taken", "timeTakenSeconds must be an integer") from exc
        correct, total, percentage, passed = score_answers(validated)

        row = await self.repository.record_attempt(
            student_id=student_id,
            topic_id=topic,
            score=correct,
            total=total,
            percentage=percentage,
            passed=passed,
            time_taken_seconds=time_taken,
            answers=[answer.model_dump(by_alias=True) for answer in validated],
        )
        logger.info(
            "practice_attempt_recorded student_id=%s topic_id=%s attempt_number=%s percentage=%s",
            student_id,
            topic,
            row.get("attempt_number"),
            percentage,
        )
        return _summary_from_row(row)

    async def get_attempts(self, *, student_id: str, topic_id: str) -> PracticeAttemptList:
        topic = parse_uuid(topic_id)
        if topic is None:
            return PracticeAttemptList(attempts=[], best_percentage=0.0)
        rows = await self.repository.list_attempts(student_id, topic)
        attempts = [_summary_from_row(row) for row in rows]
        attempts.sort(key=lambda a: a.attempt_number, reverse=True)
        best = max((a.percentage for a in attempts), default=0.0)
        return PracticeAttemptList(attempts=attempts, best_percentage=best)

    async def get_attempt_detail(
        self,
        *,
        student_id: str,
        attempt_id: str,
        topic_id: Optional[str] = None,
    ) -> PracticeAttemptDetail:
        attempt = parse_uuid(attempt_id)
        topic = parse_uuid(topic_id) if topic_id is not None else None
        if attempt is None or (topic_id is not None and topic is None):
            raise NotFoundError("attempt_not_found", "Attempt not found")
        row = await self.repository.get_attempt(student_id, attempt)
        if not row or str(row.get("student_id", student_id)) != str(student_id):
            raise NotFoundError("attempt_not_found", "Attempt not found")
        if topic is not None and parse_uuid(row.get("topic_id")) != topic:
            raise NotFoundError("attempt_not_found", "Attempt not found")
        return _detail_from_row(row)


practice_service = PracticeService()

__all__ = ["practice_service", "PracticeService", "compute_percentage", "score_answers", "PASS_PERCENTAGE"]
