"""Declarative base shared by the scoring table models."""

from __future__ import annotations

from typing import List

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def list_models() -> List[str]:
    """Names of the mapped classes registered on ``Base``."""
    return sorted(mapper.class_.__name__ for mapper in Base.registry.mappers)


__all__ = ["Base", "list_models"]
