from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from app.common.errors import PersistenceError
from app.common.utils import safe_json_loads
from app.db.repository import SupabaseRepository
from app.features.coding.schemas import ChallengeSpec

logger = logging.getLogger("coding.repository")

# Languages rendered and validated in the learner's browser
WEB_LANGUAGES = {"html", "css", "javascript"}

_SPEC_ADAPTER = TypeAdapter(ChallengeSpec)


def _load_test_cases(raw: Any) -> List[Dict[str, Any]]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = safe_json_loads(raw, default=None)
        if raw is None:
            logger.warning("coding_practices.test_cases is not valid JSON; ignoring")
            return []
    if not isinstance(raw, list):
        return []
    return [case for case in raw if isinstance(case, dict)]


def spec_from_row(row: Dict[str, Any]) -> ChallengeSpec:
    """Build the tagged challenge spec from a ``coding_practices`` row."""
    language = str(row.get("language") or "javascript").strip().lower()
    data: Dict[str, Any] = {
        "topic_id": str(row.get("topic_id") or ""),
        "language": language,
        "starter_code": row.get("starter_code") or "",
    }
    if language in WEB_LANGUAGES:
        data.update(kind="web", test_script=row.get("test_script") or None)
    else:
        cases = []
        for case in _load_test_cases(row.get("test_cases")):
            expected = case.get("expectedOutput", case.get("expected_output"))
            cases.append({"input": str(case.get("input") or ""), "expected_output": "" if expected is None else str(expected)})
        data.update(kind="executed", test_cases=cases, fallback_expected_output=row.get("expected_output") or "")
    return _SPEC_ADAPTER.validate_python(data)


class ChallengeSpecStore(SupabaseRepository):
    """Read-only view over the per-topic coding challenge definitions."""

    _TABLE = "coding_practices"

    async def get_challenge_spec(self, topic_id: str) -> Optional[ChallengeSpec]:
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .select("topic_id, language, starter_code, expected_output, test_cases, test_script")
            .eq("topic_id", topic_id)
            .limit(1)
        )
        row = self._first(await self._execute(query, op="coding_practices.single"))
        if not row:
            return None
        return spec_from_row(row)


class CodingSubmissionsRepository(SupabaseRepository):
    _TABLE = "coding_submissions"

    async def upsert_submission(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Write the single verdict row for (student, topic), replacing any previous one."""
        client = await self._client()
        query = client.table(self._TABLE).upsert(payload, on_conflict="student_id,topic_id")
        row = self._first(await self._execute(query, op="coding_submissions.upsert"))
        if not row:
            raise PersistenceError("coding_submissions.upsert_failed", "Failed to persist coding submission")
        return row

    async def get_submission(self, student_id: str, topic_id: str) -> Optional[Dict[str, Any]]:
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .select("*")
            .eq("student_id", student_id)
            .eq("topic_id", topic_id)
            .limit(1)
        )
        return self._first(await self._execute(query, op="coding_submissions.single"))

    async def list_submissions(self, student_id: str) -> List[Dict[str, Any]]:
        client = await self._client()
        query = (
            client.table(self._TABLE)
            .select("id, topic_id, passed, language, updated_at")
            .eq("student_id", student_id)
            .order("updated_at", desc=True)
        )
        return self._rows(await self._execute(query, op="coding_submissions.list"))


challenge_spec_store = ChallengeSpecStore()
coding_submissions_repository = CodingSubmissionsRepository()

__all__ = [
    "challenge_spec_store",
    "coding_submissions_repository",
    "ChallengeSpecStore",
    "CodingSubmissionsRepository",
    "spec_from_row",
    "WEB_LANGUAGES",
]
