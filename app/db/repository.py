from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from app.common.errors import PersistenceError, UniqueViolation
from app.db.supabase import get_supabase

logger = logging.getLogger("db.repository")

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"
PAGE_SIZE = 1000


class SupabaseRepository:
    """Shared Supabase plumbing for feature repositories.

    Store failures are logged and re-raised as ``PersistenceError`` so that the
    request fails loudly instead of continuing on partial data.
    """

    async def _client(self):
        return await get_supabase()

    async def _execute(self, query, op: str) -> Any:
        try:
            return await query.execute()
        except APIError as exc:
            logger.warning("supabase_%s_failed code=%s error=%s", op, exc.code, exc.message)
            if exc.code == UNIQUE_VIOLATION:
                raise UniqueViolation(f"{op}_conflict", exc.message) from exc
            raise PersistenceError(f"{op}_failed", exc.message) from exc
        except Exception as exc:
            logger.warning("supabase_%s_failed error=%s", op, exc)
            raise PersistenceError(f"{op}_failed", str(exc)) from exc

    @staticmethod
    def _rows(resp: Any) -> List[Dict[str, Any]]:
        data = getattr(resp, "data", None)
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    async def _fetch_all(self, build_query, op: str, page_size: Optional[int] = None) -> List[Dict[str, Any]]:
        """Read every row of a query page by page.

        ``build_query`` is called once per page and must return a fresh query;
        PostgREST caps unranged selects, so large tables are walked with ``range``.
        """
        page_size = page_size or PAGE_SIZE
        rows: List[Dict[str, Any]] = []
        start = 0
        while True:
            query = build_query().range(start, start + page_size - 1)
            page = self._rows(await self._execute(query, op=op))
            rows.extend(page)
            if len(page) < page_size:
                return rows
            start += page_size

    @classmethod
    def _first(cls, resp: Any) -> Optional[Dict[str, Any]]:
        rows = cls._rows(resp)
        return rows[0] if rows else None


__all__ = ["SupabaseRepository", "UNIQUE_VIOLATION", "PAGE_SIZE"]
