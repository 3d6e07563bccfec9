"""Public interface for the topology descriptor adapter."""

from __future__ import annotations

from .loader import descriptor_files, load_topology, parse_descriptor
from .schema import TopologyDocument
from .translator import to_topology

__all__ = [
    "TopologyDocument",
    "descriptor_files",
    "load_topology",
    "parse_descriptor",
    "to_topology",
]
