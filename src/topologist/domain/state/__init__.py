"""Persisted-state cache and its controller."""

from __future__ import annotations

from .cache import STORE_TYPE, ClusterState
from .controller import BackendController

__all__ = ["STORE_TYPE", "BackendController", "ClusterState"]
