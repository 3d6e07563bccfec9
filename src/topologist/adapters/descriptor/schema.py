"""Pydantic models describing the YAML topology descriptor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Self, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from topologist.domain.model import DEFAULT_PARTITIONS, DEFAULT_REPLICATION_FACTOR
from topologist.domain.model.topology import DEFAULT_SCHEMA_TYPE

PARTITIONS_KEY = "num.partitions"
REPLICATION_FACTOR_KEY = "replication.factor"


class DescriptorBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class TopicRefs(DescriptorBaseModel):
    read: list[str] = Field(default_factory=list[str])
    write: list[str] = Field(default_factory=list[str])


class ConsumerModel(DescriptorBaseModel):
    principal: str
    group: str = "*"


class ProducerModel(DescriptorBaseModel):
    principal: str
    transaction_id: str | None = Field(default=None, alias="transactionId")
    idempotence: bool = False


class StreamsModel(DescriptorBaseModel):
    principal: str
    application_id: str | None = Field(default=None, alias="applicationId")
    topics: TopicRefs = Field(default_factory=TopicRefs)


class ConnectorModel(DescriptorBaseModel):
    principal: str
    group: str = "connect-cluster"
    topics: TopicRefs = Field(default_factory=TopicRefs)


class SchemasModel(DescriptorBaseModel):
    key_schema_file: str | None = Field(default=None, alias="key.schema.file")
    value_schema_file: str | None = Field(default=None, alias="value.schema.file")
    schema_type: str = Field(default=DEFAULT_SCHEMA_TYPE, alias="schema.type")


class TopicModel(DescriptorBaseModel):
    name: str
    data_type: str | None = Field(default=None, alias="dataType")
    partitions: int = Field(default=DEFAULT_PARTITIONS)
    replication_factor: int = Field(default=DEFAULT_REPLICATION_FACTOR)
    config: dict[str, str] = Field(default_factory=dict[str, str])
    schemas: SchemasModel | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_sizing(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        data = dict(cast(Mapping[str, object], value))
        config = data.get("config")
        if isinstance(config, Mapping):
            remaining = dict(cast(Mapping[str, object], config))
            if PARTITIONS_KEY in remaining:
                data["partitions"] = remaining.pop(PARTITIONS_KEY)
            if REPLICATION_FACTOR_KEY in remaining:
                data["replication_factor"] = remaining.pop(REPLICATION_FACTOR_KEY)
            data["config"] = remaining
        return data

    @field_validator("config", mode="before")
    @classmethod
    def _stringify_config(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping = cast(Mapping[object, object], value)
            return {str(key): _config_value(item) for key, item in mapping.items()}
        return value


def _config_value(value: object) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class ProjectModel(DescriptorBaseModel):
    name: str
    zookeepers: list[str] = Field(default_factory=list[str])
    consumers: list[ConsumerModel] = Field(default_factory=list[ConsumerModel])
    producers: list[ProducerModel] = Field(default_factory=list[ProducerModel])
    streams: list[StreamsModel] = Field(default_factory=list[StreamsModel])
    connectors: list[ConnectorModel] = Field(default_factory=list[ConnectorModel])
    topics: list[TopicModel] = Field(default_factory=list[TopicModel])


class TopologyDocument(BaseModel):
    """Root of a descriptor; unknown scalar keys become topic-name prefix parts."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    context: str
    projects: list[ProjectModel] = Field(default_factory=list[ProjectModel])

    @model_validator(mode="after")
    def _check_prefix_parts(self) -> Self:
        for key, value in (self.model_extra or {}).items():
            if not isinstance(value, str | int):
                raise ValueError(
                    f"top-level key '{key}' must be a scalar, got {type(value).__name__}"
                )
        return self

    @property
    def prefix_parts(self) -> tuple[str, ...]:
        return tuple(str(value) for value in (self.model_extra or {}).values())
