from __future__ import annotations

from typing import Any, Dict, Iterable, List

from app.db.repository import SupabaseRepository

NAME_CHUNK = 200


class LeaderboardRepository(SupabaseRepository):
    """Full-table reads feeding the on-demand leaderboard aggregation."""

    async def all_best_scores(self) -> List[Dict[str, Any]]:
        client = await self._client()
        return await self._fetch_all(
            lambda: client.table("practice_scores").select("student_id, topic_id, percentage").order("id"),
            op="practice_scores.scan",
        )

    async def all_passed_submissions(self) -> List[Dict[str, Any]]:
        client = await self._client()
        return await self._fetch_all(
            lambda: client.table("coding_submissions")
            .select("student_id, topic_id, passed")
            .eq("passed", True)
            .order("id"),
            op="coding_submissions.scan",
        )

    async def student_names(self, student_ids: Iterable[str]) -> Dict[str, str]:
        ids = sorted({str(s) for s in student_ids})
        if not ids:
            return {}
        client = await self._client()
        names: Dict[str, str] = {}
        # keep the in.() filter within PostgREST URL limits
        for start in range(0, len(ids), NAME_CHUNK):
            chunk = ids[start : start + NAME_CHUNK]
            query = client.table("students").select("id, name").in_("id", chunk)
            for row in self._rows(await self._execute(query, op="students.names")):
                names[str(row.get("id"))] = row.get("name") or ""
        return names


leaderboard_repository = LeaderboardRepository()

__all__ = ["leaderboard_repository", "LeaderboardRepository"]
