"""Access-control bindings as value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ResourceType(StrEnum):
    TOPIC = "TOPIC"
    GROUP = "GROUP"
    CLUSTER = "CLUSTER"
    TRANSACTIONAL_ID = "TRANSACTIONAL_ID"


class PatternType(StrEnum):
    LITERAL = "LITERAL"
    PREFIXED = "PREFIXED"


class AclOperation(StrEnum):
    ALL = "ALL"
    READ = "READ"
    WRITE = "WRITE"
    CREATE = "CREATE"
    DELETE = "DELETE"
    ALTER = "ALTER"
    DESCRIBE = "DESCRIBE"
    DESCRIBE_CONFIGS = "DESCRIBE_CONFIGS"
    ALTER_CONFIGS = "ALTER_CONFIGS"
    IDEMPOTENT_WRITE = "IDEMPOTENT_WRITE"


class AclPermission(StrEnum):
    ALLOW = "ALLOW"
    DENY = "DENY"


CLUSTER_RESOURCE_NAME = "kafka-cluster"
ANY_HOST = "*"


@dataclass(frozen=True, slots=True)
class AccessBinding:
    """A single access-control grant.

    Bindings compare and hash by value, so collections of them are plain sets.
    """

    resource_type: ResourceType
    resource_name: str
    principal: str
    operation: AclOperation
    pattern_type: PatternType = PatternType.LITERAL
    permission: AclPermission = AclPermission.ALLOW
    host: str = ANY_HOST

    def sort_key(self) -> tuple[str, ...]:
        return (
            self.principal,
            self.resource_type,
            self.resource_name,
            self.pattern_type,
            self.operation,
            self.permission,
            self.host,
        )

    def __str__(self) -> str:
        return (
            f"'{self.principal}' {self.permission} {self.operation} on "
            f"{self.resource_type}:{self.pattern_type}:{self.resource_name} from {self.host}"
        )


def sorted_bindings(bindings: Iterable[AccessBinding]) -> list[AccessBinding]:
    return sorted(bindings, key=AccessBinding.sort_key)
