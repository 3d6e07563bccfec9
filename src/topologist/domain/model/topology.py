"""Desired-state model: a topology of projects, their topics and their users."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

DEFAULT_PARTITIONS: Final[int] = 3
DEFAULT_REPLICATION_FACTOR: Final[int] = 2
DEFAULT_SCHEMA_TYPE: Final[str] = "AVRO"
NAME_SEPARATOR: Final[str] = "."


@dataclass(frozen=True, slots=True)
class TopicSchemas:
    key_schema_file: Path | None = None
    value_schema_file: Path | None = None
    schema_type: str = DEFAULT_SCHEMA_TYPE


@dataclass(slots=True)
class Topic:
    name: str
    data_type: str | None = None
    partitions: int = DEFAULT_PARTITIONS
    replication_factor: int = DEFAULT_REPLICATION_FACTOR
    config: dict[str, str] = field(default_factory=dict[str, str])
    schemas: TopicSchemas | None = None

    @property
    def local_name(self) -> str:
        """Name within the project, including the data-type suffix."""

        if self.data_type:
            return f"{self.name}{NAME_SEPARATOR}{self.data_type}"
        return self.name


@dataclass(frozen=True, slots=True)
class Consumer:
    principal: str
    group: str = "*"


@dataclass(frozen=True, slots=True)
class Producer:
    principal: str
    transaction_id: str | None = None
    idempotence: bool = False


@dataclass(frozen=True, slots=True)
class KafkaStreams:
    principal: str
    application_id: str | None = None
    read_topics: tuple[str, ...] = ()
    write_topics: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Connector:
    principal: str
    group: str = "connect-cluster"
    read_topics: tuple[str, ...] = ()
    write_topics: tuple[str, ...] = ()


@dataclass(slots=True)
class Project:
    name: str
    consumers: list[Consumer] = field(default_factory=list[Consumer])
    producers: list[Producer] = field(default_factory=list[Producer])
    streams: list[KafkaStreams] = field(default_factory=list[KafkaStreams])
    connectors: list[Connector] = field(default_factory=list[Connector])
    topics: list[Topic] = field(default_factory=list[Topic])
    namespace: str = ""

    @property
    def prefix(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}{NAME_SEPARATOR}{self.name}"

    def full_name(self, topic: Topic) -> str:
        return f"{self.prefix}{NAME_SEPARATOR}{topic.local_name}"

    def qualified_topics(self) -> Iterator[tuple[str, Topic]]:
        for topic in self.topics:
            yield self.full_name(topic), topic

    def principals(self) -> Iterator[str]:
        for user in (*self.consumers, *self.producers, *self.streams, *self.connectors):
            yield user.principal


@dataclass(slots=True)
class Topology:
    """Root of the desired state for one reconciliation run."""

    context: str
    prefix_parts: tuple[str, ...] = ()
    projects: list[Project] = field(default_factory=list[Project])

    def __post_init__(self) -> None:
        for project in self.projects:
            project.namespace = self.namespace

    @property
    def namespace(self) -> str:
        return NAME_SEPARATOR.join((self.context, *self.prefix_parts))

    def add_project(self, project: Project) -> None:
        project.namespace = self.namespace
        self.projects.append(project)

    def topics(self) -> Iterator[Topic]:
        for project in self.projects:
            yield from project.topics

    def qualified_topics(self) -> Iterator[tuple[str, Topic]]:
        for project in self.projects:
            yield from project.qualified_topics()
