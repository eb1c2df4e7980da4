from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from app.core.config import get_settings
from app.features.leaderboard.repository import leaderboard_repository
from app.features.leaderboard.schemas import LeaderboardEntry, LeaderboardResponse
from app.features.progress.scoring import PointTotals, totals_by_student

logger = logging.getLogger("leaderboard")


@dataclass(frozen=True)
class Standing:
    rank: int
    student_id: str
    student_name: str
    totals: PointTotals


def compute_standings(totals: Mapping[str, PointTotals], names: Mapping[str, str]) -> List[Standing]:
    """Rank every learner with points using standard competition ranking.

    ``rank`` is one plus the number of learners with a strictly greater total,
    so ties share a rank and the next rank is skipped. Order within a tie is by
    name, then id.
    """
    scored = [(sid, t) for sid, t in totals.items() if t.total_points > 0]
    scored.sort(key=lambda item: (-item[1].total_points, names.get(item[0]) or "", item[0]))
    standings: List[Standing] = []
    previous_total: Optional[int] = None
    rank = 0
    for position, (student_id, point_totals) in enumerate(scored, start=1):
        if point_totals.total_points != previous_total:
            rank = position
            previous_total = point_totals.total_points
        standings.append(
            Standing(
                rank=rank,
                student_id=student_id,
                student_name=names.get(student_id) or "",
                totals=point_totals,
            )
        )
    return standings


def rank_of(standings: List[Standing], student_id: str) -> Optional[int]:
    for standing in standings:
        if standing.student_id == str(student_id):
            return standing.rank
    return None


class LeaderboardService:
    def __init__(self, repository=leaderboard_repository):
        self.repository = repository

    async def get_leaderboard(self, *, student_id: str, limit: Optional[int] = None) -> LeaderboardResponse:
        size = limit if limit is not None else get_settings().leaderboard_size
        best_rows, coding_rows = await asyncio.gather(
            self.repository.all_best_scores(),
            self.repository.all_passed_submissions(),
        )
        totals = totals_by_student(best_rows, coding_rows)
        names: Dict[str, str] = await self.repository.student_names(
            sid for sid, t in totals.items() if t.total_points > 0
        )
        standings = compute_standings(totals, names)
        me = str(student_id)
        entries = [
            LeaderboardEntry(
                rank=s.rank,
                student_id=s.student_id,
                student_name=s.student_name,
                practice_points=s.totals.practice_points,
                coding_points=s.totals.coding_points,
                total_points=s.totals.total_points,
                is_current_user=s.student_id == me,
            )
            for s in standings[: max(0, size)]
        ]
        my_rank = rank_of(standings, me)
        logger.info("leaderboard_built learners=%s shown=%s my_rank=%s", len(standings), len(entries), my_rank)
        return LeaderboardResponse(leaderboard=entries, my_rank=my_rank)


leaderboard_service = LeaderboardService()

__all__ = ["leaderboard_service", "LeaderboardService", "compute_standings", "Standing"]
