"""
Point rules shared by the progress summary and the leaderboard.

	- Practice points: sum of the best MCQ percentage per topic, rounded to an integer.
	- Coding points: 100 per topic whose current coding verdict is a pass.
	- Total points: practice + coding.

Nothing here is stored; totals are always recomputed from the best-score
cache and the coding verdicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping

CODING_POINTS_PER_PASS = 100


@dataclass(frozen=True)
class PointTotals:
    practice_points: int = 0
    coding_points: int = 0

    @property
    def total_points(self) -> int:
        return self.practice_points + self.coding_points


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    # str() keeps NUMERIC(5,2) values exact
    return Decimal(str(value))


def round_points(value: Decimal) -> int:
    """Round half away from zero, matching Postgres ROUND on numeric."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_point_totals(best_percentages: Iterable[Any], passed_count: int) -> PointTotals:
    practice_sum = sum((_to_decimal(p) for p in best_percentages), Decimal(0))
    return PointTotals(
        practice_points=round_points(practice_sum),
        coding_points=CODING_POINTS_PER_PASS * max(0, int(passed_count)),
    )


def totals_by_student(
    best_scores: Iterable[Mapping[str, Any]],
    coding_submissions: Iterable[Mapping[str, Any]],
) -> Dict[str, PointTotals]:
    """Aggregate raw ``practice_scores`` and ``coding_submissions`` rows per learner."""
    percentages: Dict[str, List[Any]] = {}
    passes: Dict[str, int] = {}
    for row in best_scores:
        student_id = str(row.get("student_id"))
        percentages.setdefault(student_id, []).append(row.get("percentage"))
    for row in coding_submissions:
        student_id = str(row.get("student_id"))
        passes.setdefault(student_id, 0)
        if row.get("passed"):
            passes[student_id] += 1
    totals: Dict[str, PointTotals] = {}
    for student_id in set(percentages) | set(passes):
        totals[student_id] = compute_point_totals(percentages.get(student_id, []), passes.get(student_id, 0))
    return totals


def count_topics_completed(best_scores: Iterable[Mapping[str, Any]], coding_submissions: Iterable[Mapping[str, Any]]) -> int:
    """Topics with a practice score or a coding submission, each counted once."""
    topics = {str(row.get("topic_id")) for row in best_scores}
    topics.update(str(row.get("topic_id")) for row in coding_submissions)
    return len(topics)
