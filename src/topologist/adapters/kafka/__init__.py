"""Public interface for the Kafka admin adapter."""

from __future__ import annotations

from .admin import ConfluentClusterAdmin, from_kafka_binding, to_kafka_binding

__all__ = ["ConfluentClusterAdmin", "from_kafka_binding", "to_kafka_binding"]
