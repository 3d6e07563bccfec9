"""Public interface for the Schema Registry adapter."""

from __future__ import annotations

from .client import SCHEMA_REGISTRY_CONTENT_TYPE, SchemaRegistryClient, SchemaRegistryError

__all__ = ["SCHEMA_REGISTRY_CONTENT_TYPE", "SchemaRegistryClient", "SchemaRegistryError"]
