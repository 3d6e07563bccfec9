"""Mutations a plan can carry out against the live cluster."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from topologist.domain.model import sorted_bindings

if TYPE_CHECKING:
    from pathlib import Path

    from topologist.domain.model import AccessBinding, Topic
    from topologist.domain.ports import ClusterAdmin, SchemaRegistry

log = getLogger(__name__)


class Action(ABC):
    """One required mutation, produced by a diff producer."""

    @abstractmethod
    def run(self) -> None: ...

    @abstractmethod
    def describe(self) -> str: ...

    def update_state(self, bindings: set[AccessBinding]) -> None:
        """Fold the outcome of a successful :meth:`run` into ``bindings``."""

        del bindings

    def __str__(self) -> str:
        return self.describe()


def _format_config(config: dict[str, str]) -> str:
    return ", ".join(f"{key}={value}" for key, value in sorted(config.items()))


@dataclass(slots=True)
class CreateTopicAction(Action):
    admin: ClusterAdmin
    full_name: str
    topic: Topic

    def run(self) -> None:
        log.info("Creating topic %s", self.full_name)
        self.admin.create_topic(
            self.full_name,
            partitions=self.topic.partitions,
            replication_factor=self.topic.replication_factor,
            config=self.topic.config,
        )

    def describe(self) -> str:
        return (
            f"CreateTopic {self.full_name} partitions={self.topic.partitions} "
            f"replication_factor={self.topic.replication_factor} "
            f"config=[{_format_config(self.topic.config)}]"
        )


@dataclass(slots=True)
class UpdateTopicConfigAction(Action):
    admin: ClusterAdmin
    full_name: str
    config: dict[str, str]

    def run(self) -> None:
        log.info("Updating config of topic %s", self.full_name)
        self.admin.update_topic_config(self.full_name, self.config)

    def describe(self) -> str:
        return f"UpdateTopicConfig {self.full_name} config=[{_format_config(self.config)}]"


@dataclass(slots=True)
class AddPartitionsAction(Action):
    admin: ClusterAdmin
    full_name: str
    current: int
    total: int

    def run(self) -> None:
        log.info("Growing topic %s to %d partitions", self.full_name, self.total)
        self.admin.add_partitions(self.full_name, self.total)

    def describe(self) -> str:
        return f"AddPartitions {self.full_name} {self.current} -> {self.total}"


@dataclass(slots=True)
class DeleteTopicsAction(Action):
    admin: ClusterAdmin
    topics: tuple[str, ...]

    def run(self) -> None:
        log.info("Deleting topics %s", ", ".join(self.topics))
        self.admin.delete_topics(self.topics)

    def describe(self) -> str:
        return f"DeleteTopics [{', '.join(self.topics)}]"


@dataclass(slots=True)
class RegisterSchemaAction(Action):
    registry: SchemaRegistry
    subject: str
    schema_file: Path
    schema_type: str = "AVRO"
    schema_id: int | None = field(default=None, init=False)

    def run(self) -> None:
        schema = self.schema_file.read_text(encoding="utf-8")
        self.schema_id = self.registry.register(
            self.subject, schema, schema_type=self.schema_type
        )
        log.info("Registered schema %s for subject %s", self.schema_id, self.subject)

    def describe(self) -> str:
        return f"RegisterSchema {self.subject} ({self.schema_type}) from {self.schema_file}"


@dataclass(slots=True)
class CreateBindingsAction(Action):
    admin: ClusterAdmin
    bindings: frozenset[AccessBinding]

    def run(self) -> None:
        log.info("Creating %d bindings", len(self.bindings))
        self.admin.create_acls(sorted_bindings(self.bindings))

    def update_state(self, bindings: set[AccessBinding]) -> None:
        bindings.update(self.bindings)

    def describe(self) -> str:
        lines = [f"CreateBindings ({len(self.bindings)})"]
        lines.extend(f"  {binding}" for binding in sorted_bindings(self.bindings))
        return "\n".join(lines)


@dataclass(slots=True)
class ClearBindingsAction(Action):
    admin: ClusterAdmin
    bindings: frozenset[AccessBinding]

    def run(self) -> None:
        log.info("Deleting %d bindings", len(self.bindings))
        self.admin.delete_acls(sorted_bindings(self.bindings))

    def update_state(self, bindings: set[AccessBinding]) -> None:
        bindings.difference_update(self.bindings)

    def describe(self) -> str:
        lines = [f"ClearBindings ({len(self.bindings)})"]
        lines.extend(f"  {binding}" for binding in sorted_bindings(self.bindings))
        return "\n".join(lines)
