from __future__ import annotations

import asyncio
from typing import Any, Dict

from app.common.utils import parse_timestamp
from app.features.coding.repository import coding_submissions_repository
from app.features.practice.repository import practice_repository
from app.features.practice.schemas import PracticeBestScoreOut
from app.features.progress.schemas import CodingSubmissionSummary, ProgressResponse, ProgressStats
from app.features.progress.scoring import compute_point_totals, count_topics_completed


def _best_score_out(row: Dict[str, Any]) -> PracticeBestScoreOut:
    return PracticeBestScoreOut(
        id=str(row["id"]) if row.get("id") is not None else None,
        topic_id=str(row.get("topic_id")),
        score=int(row.get("score") or 0),
        total=int(row.get("total") or 0),
        percentage=float(row.get("percentage") or 0),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _submission_out(row: Dict[str, Any]) -> CodingSubmissionSummary:
    return CodingSubmissionSummary(
        id=str(row["id"]) if row.get("id") is not None else None,
        topic_id=str(row.get("topic_id")),
        passed=bool(row.get("passed")),
        language=row.get("language"),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


class ProgressService:
    def __init__(self, practice_repo=practice_repository, coding_repo=coding_submissions_repository):
        self.practice_repo = practice_repo
        self.coding_repo = coding_repo

    async def get_progress(self, *, student_id: str) -> ProgressResponse:
        """Point totals and completed-topic count for one learner. Read only."""
        best_rows, coding_rows = await asyncio.gather(
            self.practice_repo.list_best_scores(student_id),
            self.coding_repo.list_submissions(student_id),
        )
        totals = compute_point_totals(
            (row.get("percentage") for row in best_rows),
            sum(1 for row in coding_rows if row.get("passed")),
        )
        return ProgressResponse(
            practice_scores=[_best_score_out(row) for row in best_rows],
            coding_submissions=[_submission_out(row) for row in coding_rows],
            stats=ProgressStats(
                practice_points=totals.practice_points,
                coding_points=totals.coding_points,
                total_points=totals.total_points,
                topics_completed=count_topics_completed(best_rows, coding_rows),
            ),
        )


progress_service = ProgressService()

__all__ = ["progress_service", "ProgressService"]
