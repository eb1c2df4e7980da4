from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from app.common.errors import PersistenceError
from app.db.repository import SupabaseRepository


class CompletionsRepository(SupabaseRepository):
    _TABLE = "topic_completions"

    async def upsert_completion(self, student_id: str, topic_id: str, item_type: str) -> Dict[str, Any]:
        client = await self._client()
        query = client.table(self._TABLE).upsert(
            {"student_id": student_id, "topic_id": topic_id, "item_type": item_type},
            on_conflict="student_id,topic_id,item_type",
        )
        row = self._first(await self._execute(query, op="topic_completions.upsert"))
        if not row:
            raise PersistenceError("topic_completions.upsert_failed", "Failed to persist completion")
        return row

    async def list_completions(self, student_id: str, topic_ids: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        client = await self._client()
        query = client.table(self._TABLE).select("topic_id, item_type").eq("student_id", student_id)
        if topic_ids is not None:
            query = query.in_("topic_id", list(topic_ids))
        return self._rows(await self._execute(query.order("completed_at"), op="topic_completions.list"))

    async def course_topic_ids(self, course_id: str) -> List[str]:
        client = await self._client()
        query = client.table("topics").select("id").eq("course_id", course_id)
        return [str(row.get("id")) for row in self._rows(await self._execute(query, op="topics.by_course"))]


completions_repository = CompletionsRepository()

__all__ = ["completions_repository", "CompletionsRepository"]
