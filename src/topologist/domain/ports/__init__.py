"""Domain port definitions for adapters."""

from __future__ import annotations

from .backend import Backend
from .cluster import ClusterAdmin
from .diff import DiffProducer
from .schemas import SchemaRegistry

__all__ = ["Backend", "ClusterAdmin", "DiffProducer", "SchemaRegistry"]
