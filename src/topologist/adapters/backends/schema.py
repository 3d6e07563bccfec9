"""Pydantic models for the persisted state document shared by all backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from topologist.domain.model import (
    ANY_HOST,
    AccessBinding,
    AclOperation,
    AclPermission,
    PatternType,
    ResourceType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

STATE_DOCUMENT_VERSION = 1


class StateBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class StoredBinding(StateBaseModel):
    resource_type: ResourceType = Field(alias="resourceType")
    resource_name: str = Field(alias="resourceName")
    pattern_type: PatternType = Field(default=PatternType.LITERAL, alias="patternType")
    principal: str
    operation: AclOperation
    permission: AclPermission = AclPermission.ALLOW
    host: str = ANY_HOST

    @classmethod
    def from_domain(cls, binding: AccessBinding) -> StoredBinding:
        return cls(
            resource_type=binding.resource_type,
            resource_name=binding.resource_name,
            pattern_type=binding.pattern_type,
            principal=binding.principal,
            operation=binding.operation,
            permission=binding.permission,
            host=binding.host,
        )

    def to_domain(self) -> AccessBinding:
        return AccessBinding(
            resource_type=self.resource_type,
            resource_name=self.resource_name,
            pattern_type=self.pattern_type,
            principal=self.principal,
            operation=self.operation,
            permission=self.permission,
            host=self.host,
        )


class StateDocument(StateBaseModel):
    version: int = STATE_DOCUMENT_VERSION
    type: str | None = None
    bindings: list[StoredBinding] = Field(default_factory=list[StoredBinding])


def encode_binding(binding: AccessBinding) -> str:
    return StoredBinding.from_domain(binding).model_dump_json(by_alias=True)


def decode_binding(payload: str | bytes) -> AccessBinding:
    return StoredBinding.model_validate_json(payload).to_domain()


def build_document(type_name: str | None, bindings: Iterable[AccessBinding]) -> StateDocument:
    ordered = sorted(bindings, key=AccessBinding.sort_key)
    return StateDocument(type=type_name, bindings=[StoredBinding.from_domain(b) for b in ordered])
