import json
import uuid
from typing import Any, Optional
from datetime import datetime


def safe_json_loads(json_str: Optional[str], default: Any = None) -> Any:
    """Safely load JSON string with fallback"""
    if not json_str:
        return default
    try:
        return json.loads(json_str)
    except (json.JSONDecodeError, TypeError):
        return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a PostgREST timestamp (ISO string, possibly ``Z`` suffixed)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_uuid(value: Any) -> Optional[str]:
    """Canonical string form of a UUID id, or None when ``value`` is not one."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    try:
        return str(uuid.UUID(str(value).strip()))
    except ValueError:
        return None
