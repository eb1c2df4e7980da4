from __future__ import annotations

import logging
from typing import Dict, List, Optional

from app.common.errors import ValidationError
from app.common.utils import parse_timestamp, parse_uuid
from app.features.completions.repository import completions_repository
from app.features.completions.schemas import CompletionOut, CompletionsResponse

logger = logging.getLogger("completions")

ITEM_TYPES = ("video", "ppt", "practice", "codingPractice")


class CompletionsService:
    def __init__(self, repository=completions_repository):
        self.repository = repository

    async def mark_complete(self, *, student_id: str, topic_id: str, item_type: str) -> CompletionOut:
        """Record that a learner finished one item of a topic. Repeats are no-ops."""
        if not topic_id or not item_type:
            raise ValidationError("topic_and_item_required", "topicId and itemType are required")
        if item_type not in ITEM_TYPES:
            raise ValidationError("invalid_item_type", f"itemType must be one of: {', '.join(ITEM_TYPES)}")
        topic = parse_uuid(topic_id)
        if topic is None:
            raise ValidationError("invalid_topic_id", "topicId must be a UUID")
        row = await self.repository.upsert_completion(student_id, topic, item_type)
        logger.info("topic_item_completed student_id=%s topic_id=%s item_type=%s", student_id, topic, item_type)
        return CompletionOut(
            id=str(row["id"]) if row.get("id") is not None else None,
            student_id=str(row.get("student_id", student_id)),
            topic_id=str(row.get("topic_id", topic)),
            item_type=row.get("item_type", item_type),
            completed_at=parse_timestamp(row.get("completed_at")),
        )

    async def get_completions(self, *, student_id: str, course_id: Optional[str] = None) -> CompletionsResponse:
        topic_ids: Optional[List[str]] = None
        if course_id:
            course = parse_uuid(course_id)
            topic_ids = await self.repository.course_topic_ids(course) if course else []
            if not topic_ids:
                return CompletionsResponse(completions={})
        rows = await self.repository.list_completions(student_id, topic_ids)
        completions: Dict[str, List[str]] = {}
        for row in rows:
            item_type = row.get("item_type")
            if item_type not in ITEM_TYPES:
                continue
            completions.setdefault(str(row.get("topic_id")), []).append(item_type)
        return CompletionsResponse(completions=completions)


completions_service = CompletionsService()

__all__ = ["completions_service", "CompletionsService", "ITEM_TYPES"]
