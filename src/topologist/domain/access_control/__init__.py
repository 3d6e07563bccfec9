"""Access-control diff producer and binding derivation."""

from __future__ import annotations

from .bindings import CONNECT_INTERNAL_TOPICS, AclBindingsBuilder
from .manager import AccessControlManager

__all__ = ["CONNECT_INTERNAL_TOPICS", "AccessControlManager", "AclBindingsBuilder"]
