from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.common.errors import PersistenceError
from app.db.repository import SupabaseRepository

_SUMMARY_COLUMNS = "id, topic_id, attempt_number, score, total, percentage, passed, time_taken_seconds, created_at"


class PracticeRepository(SupabaseRepository):
    """Data access for MCQ attempt history and the best-score cache."""

    _ATTEMPTS_TABLE = "practice_attempts"
    _BEST_TABLE = "practice_scores"
    _RECORD_RPC = "record_practice_attempt"

    async def record_attempt(
        self,
        *,
        student_id: str,
        topic_id: str,
        score: int,
        total: int,
        percentage: float,
        passed: bool,
        time_taken_seconds: int,
        answers: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Append one attempt and raise the best score in one database transaction.

        The stored function assigns the next attempt number for the pair, inserts
        the attempt and applies the greater-than best-score upsert. A failure
        leaves neither table changed.
        """
        client = await self._client()
        query = client.rpc(
            self._RECORD_RPC,
            {
                "p_student_id": student_id,
                "p_topic_id": topic_id,
                "p_score": score,
                "p_total": total,
                "p_percentage": percentage,
                "p_passed": passed,
                "p_time_taken_seconds": time_taken_seconds,
                "p_answers": answers,
            },
        )
        row = self._first(await self._execute(query, op="practice_attempts.record"))
        if not row:
            raise PersistenceError("practice_attempts.record_failed", "Failed to persist practice attempt")
        return row

    async def list_attempts(self, student_id: str, topic_id: str) -> List[Dict[str, Any]]:
        client = await self._client()
        query = (
            client.table(self._ATTEMPTS_TABLE)
            .select(_SUMMARY_COLUMNS)
            .eq("student_id", student_id)
            .eq("topic_id", topic_id)
            .order("attempt_number", desc=True)
        )
        return self._rows(await self._execute(query, op="practice_attempts.list"))

    async def get_attempt(self, student_id: str, attempt_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = (
            client.table(self._ATTEMPTS_TABLE)
            .select("*")
            .eq("id", attempt_id)
            .eq("student_id", student_id)
            .limit(1)
        )
        return self._first(await self._execute(query, op="practice_attempts.single"))

    async def list_best_scores(self, student_id: str) -> List[Dict[str, Any]]:
        client = await self._client()
        query = (
            client.table(self._BEST_TABLE)
            .select("*")
            .eq("student_id", student_id)
            .order("updated_at", desc=True)
        )
        return self._rows(await self._execute(query, op="practice_scores.list"))


practice_repository = PracticeRepository()

__all__ = ["practice_repository", "PracticeRepository"]
