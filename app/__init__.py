"""Scoring engine application package.

``app`` (the FastAPI instance) is resolved lazily so alembic and scripts that
only need settings or models do not import the routers."""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name == "app":
        from .main import app as fastapi_app
        return fastapi_app
    raise AttributeError(f"module {__name__} has no attribute {name!r}")
