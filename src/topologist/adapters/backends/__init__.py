"""Persisted-state backend variants."""

from __future__ import annotations

from .file import FileBackend
from .redis import RedisBackend
from .sqlalchemy import SqlAlchemyBackend

__all__ = ["FileBackend", "RedisBackend", "SqlAlchemyBackend"]
