"""Port for the live Kafka cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from topologist.domain.model import AccessBinding


@runtime_checkable
class ClusterAdmin(Protocol):
    """Administrative operations the diff producers and actions rely on."""

    def list_topics(self) -> set[str]: ...

    def partition_count(self, topic: str) -> int: ...

    def describe_topic_config(self, topic: str) -> dict[str, str]: ...

    def create_topic(
        self,
        topic: str,
        *,
        partitions: int,
        replication_factor: int,
        config: Mapping[str, str],
    ) -> None: ...

    def update_topic_config(self, topic: str, config: Mapping[str, str]) -> None: ...

    def add_partitions(self, topic: str, total_count: int) -> None: ...

    def delete_topics(self, topics: Iterable[str]) -> None: ...

    def list_acls(self) -> set[AccessBinding]: ...

    def create_acls(self, bindings: Iterable[AccessBinding]) -> None: ...

    def delete_acls(self, bindings: Iterable[AccessBinding]) -> None: ...

    def close(self) -> None: ...
