from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.features.practice.schemas import PracticeBestScoreOut


class CodingSubmissionSummary(BaseModel):
    id: Optional[str] = None
    topic_id: str
    passed: bool
    language: Optional[str] = None
    updated_at: Optional[datetime] = None


class ProgressStats(BaseModel):
    practice_points: int = 0
    coding_points: int = 0
    total_points: int = 0
    topics_completed: int = 0


class ProgressResponse(BaseModel):
    practice_scores: List[PracticeBestScoreOut] = Field(default_factory=list)
    coding_submissions: List[CodingSubmissionSummary] = Field(default_factory=list)
    stats: ProgressStats
