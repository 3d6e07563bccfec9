"""Diff producer for topics and their schemas."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from topologist.domain.model.topology import NAME_SEPARATOR
from topologist.domain.plan import (
    AddPartitionsAction,
    CreateTopicAction,
    DeleteTopicsAction,
    RegisterSchemaAction,
    UpdateTopicConfigAction,
)

if TYPE_CHECKING:
    from typing import TextIO

    from topologist.domain.model import Topic, Topology
    from topologist.domain.plan import ExecutionPlan
    from topologist.domain.ports import ClusterAdmin, SchemaRegistry

log = getLogger(__name__)

INTERNAL_TOPIC_PREFIX: Final[str] = "_"


def is_internal_topic(name: str) -> bool:
    return name.startswith(INTERNAL_TOPIC_PREFIX)


class TopicManager:
    """Compare the topology's topics with the live cluster and plan the difference."""

    def __init__(
        self,
        admin: ClusterAdmin,
        *,
        allow_delete: bool = False,
        schema_registry: SchemaRegistry | None = None,
    ) -> None:
        self.admin = admin
        self.allow_delete = allow_delete
        self.schema_registry = schema_registry

    def apply(self, topology: Topology, plan: ExecutionPlan) -> None:
        live = {name for name in self.admin.list_topics() if not is_internal_topic(name)}
        desired: set[str] = set()

        for full_name, topic in topology.qualified_topics():
            desired.add(full_name)
            if full_name in live:
                self._plan_sync(full_name, topic, plan)
            else:
                plan.add(CreateTopicAction(self.admin, full_name, topic))
                self._plan_schemas(full_name, topic, plan)

        if not self.allow_delete:
            return
        owned_prefix = f"{topology.namespace}{NAME_SEPARATOR}"
        stale = sorted(name for name in live - desired if name.startswith(owned_prefix))
        if stale:
            plan.add(DeleteTopicsAction(self.admin, tuple(stale)))

    def _plan_sync(self, full_name: str, topic: Topic, plan: ExecutionPlan) -> None:
        current_config = self.admin.describe_topic_config(full_name)
        changes = {
            key: value for key, value in topic.config.items() if current_config.get(key) != value
        }
        if changes:
            plan.add(UpdateTopicConfigAction(self.admin, full_name, changes))

        current_partitions = self.admin.partition_count(full_name)
        if topic.partitions > current_partitions:
            plan.add(
                AddPartitionsAction(self.admin, full_name, current_partitions, topic.partitions)
            )
        elif topic.partitions < current_partitions:
            log.warning(
                "Topic %s has %d partitions, cannot shrink to %d",
                full_name,
                current_partitions,
                topic.partitions,
            )

    def _plan_schemas(self, full_name: str, topic: Topic, plan: ExecutionPlan) -> None:
        schemas = topic.schemas
        if schemas is None:
            return
        if self.schema_registry is None:
            log.warning("Skipping schemas for %s: no schema registry configured", full_name)
            return
        for suffix, schema_file in (
            ("key", schemas.key_schema_file),
            ("value", schemas.value_schema_file),
        ):
            if schema_file is None:
                continue
            plan.add(
                RegisterSchemaAction(
                    self.schema_registry,
                    f"{full_name}-{suffix}",
                    schema_file,
                    schemas.schema_type,
                )
            )

    def print_current_state(self, sink: TextIO) -> None:
        sink.write("List of Topics:\n")
        for name in sorted(self.admin.list_topics()):
            if not is_internal_topic(name):
                sink.write(f"  {name}\n")

    def __repr__(self) -> str:
        return f"TopicManager(allow_delete={self.allow_delete})"
