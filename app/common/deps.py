"""Shared FastAPI dependencies for authentication."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import get_settings
from app.db.supabase import get_supabase


logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=True)


class CurrentUser(BaseModel):
    """Learner identity resolved from the bearer token."""
    id: str
    email: Optional[str] = None
    role: str = "student"


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """Validate the bearer token with Supabase Auth and return the learner.

    The learner id is the auth user id, which is also the ``students.id``
    every scoring table references.
    """
    client = await get_supabase()
    token = credentials.credentials
    try:
        # Clamp whoami to avoid long stalls on a slow auth server
        t0 = time.perf_counter()
        auth_user = await asyncio.wait_for(client.auth.get_user(token), timeout=get_settings().auth_timeout_s)
        ms = int((time.perf_counter() - t0) * 1000)
        if ms > 50:
            logger.info("auth.get_user_ms=%d", ms)
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials") from exc

    if not auth_user or not auth_user.user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials")

    sup_user = auth_user.user
    metadata = sup_user.user_metadata or {}
    email = sup_user.email or metadata.get("email")
    role = (sup_user.app_metadata or {}).get("role") or metadata.get("role") or "student"
    current = CurrentUser(id=str(sup_user.id), email=email, role=str(role))

    request_id = getattr(request.state, "request_id", None)
    logger.info(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        request_id,
        request.url.path,
    )
    return current


__all__ = ["CurrentUser", "get_current_user", "security"]
