"""Port for a schema registry."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SchemaRegistry(Protocol):
    def register(self, subject: str, schema: str, *, schema_type: str = "AVRO") -> int: ...

    def close(self) -> None: ...
