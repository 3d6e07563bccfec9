"""Relational backend built on SQLAlchemy Core."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.exc import SQLAlchemyError

from topologist.domain.errors import StorageError, StorageUnavailableError
from topologist.domain.model import (
    AccessBinding,
    AclOperation,
    AclPermission,
    PatternType,
    ResourceType,
)
from topologist.domain.state import STORE_TYPE

if TYPE_CHECKING:
    from collections.abc import Set

    from sqlalchemy.engine import Engine, RowMapping

log = getLogger(__name__)

metadata: Final[MetaData] = MetaData()

state_table: Final[Table] = Table(
    "topology_state",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("state_type", String(64), nullable=False, index=True),
    Column("resource_type", String(32), nullable=False),
    Column("resource_name", String(255), nullable=False),
    Column("pattern_type", String(16), nullable=False),
    Column("principal", String(255), nullable=False),
    Column("operation", String(32), nullable=False),
    Column("permission", String(16), nullable=False),
    Column("host", String(255), nullable=False),
    UniqueConstraint(
        "state_type",
        "resource_type",
        "resource_name",
        "pattern_type",
        "principal",
        "operation",
        "permission",
        "host",
        name="uq_topology_state_binding",
    ),
)


def _to_row(type_name: str, binding: AccessBinding) -> dict[str, str]:
    return {
        "state_type": type_name,
        "resource_type": binding.resource_type.value,
        "resource_name": binding.resource_name,
        "pattern_type": binding.pattern_type.value,
        "principal": binding.principal,
        "operation": binding.operation.value,
        "permission": binding.permission.value,
        "host": binding.host,
    }


def _from_row(row: RowMapping) -> AccessBinding:
    return AccessBinding(
        resource_type=ResourceType(row["resource_type"]),
        resource_name=row["resource_name"],
        pattern_type=PatternType(row["pattern_type"]),
        principal=row["principal"],
        operation=AclOperation(row["operation"]),
        permission=AclPermission(row["permission"]),
        host=row["host"],
    )


class SqlAlchemyBackend:
    """Store bindings as rows keyed by state type; a save replaces them in one transaction."""

    def __init__(self, database_uri: str, *, default_type: str = STORE_TYPE) -> None:
        self.database_uri = database_uri
        self._type_name = default_type
        self._engine: Engine | None = None

    def create_or_open(self) -> None:
        if self._engine is not None:
            return
        try:
            engine = create_engine(self.database_uri, future=True)
            metadata.create_all(engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(
                f"Cannot open state database {self.database_uri}: {exc}"
            ) from exc
        log.debug("Opened state database %s", engine.url)
        self._engine = engine

    def save_type(self, type_name: str) -> None:
        self._type_name = type_name

    def save_bindings(self, bindings: Set[AccessBinding]) -> None:
        engine = self._require_engine()
        rows = [_to_row(self._type_name, binding) for binding in bindings]
        try:
            with engine.begin() as connection:
                connection.execute(
                    delete(state_table).where(state_table.c.state_type == self._type_name)
                )
                if rows:
                    connection.execute(insert(state_table), rows)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot save bindings to {self.database_uri}: {exc}") from exc

    def load(self) -> set[AccessBinding]:
        engine = self._require_engine()
        stmt = select(state_table).where(state_table.c.state_type == self._type_name)
        try:
            with engine.connect() as connection:
                return {_from_row(row) for row in connection.execute(stmt).mappings()}
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot load bindings from {self.database_uri}: {exc}") from exc

    def close(self) -> None:
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        engine.dispose()

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise StorageError("Database backend used before create_or_open()")
        return self._engine
