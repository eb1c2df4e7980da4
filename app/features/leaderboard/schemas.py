from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    rank: int
    student_id: str
    student_name: Optional[str] = None
    practice_points: int = 0
    coding_points: int = 0
    total_points: int = 0
    is_current_user: bool = False


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    my_rank: Optional[int] = None
