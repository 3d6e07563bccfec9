"""Run configuration assembled from CLI options and the client-config file."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .errors import ConfigurationError, MissingConfigurationError
from .storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping

    from topologist.domain.model import Topology

    from .storage import StorageConfig

BROKERS_OPTION: Final[str] = "brokers"
CLIENT_CONFIG_OPTION: Final[str] = "clientConfig"
ALLOW_DELETE_OPTION: Final[str] = "allowDelete"
DRY_RUN_OPTION: Final[str] = "dryRun"
QUIET_OPTION: Final[str] = "quiet"

BUILDER_PREFIX: Final[str] = "topology.builder."
STATE_PROCESSOR_CONFIG: Final[str] = "topology.builder.state.processor"
STATE_FILE_CONFIG: Final[str] = "topology.builder.state.file"
DATABASE_URI_CONFIG: Final[str] = "topology.builder.state.database.uri"
REDIS_HOST_CONFIG: Final[str] = "topology.builder.redis.host"
REDIS_PORT_CONFIG: Final[str] = "topology.builder.redis.port"
REDIS_KEY_PREFIX_CONFIG: Final[str] = "topology.builder.redis.key.prefix"
SCHEMA_REGISTRY_URL_CONFIG: Final[str] = "confluent.schema.registry.url"
BOOTSTRAP_SERVERS_CONFIG: Final[str] = "bootstrap.servers"

DEFAULT_REDIS_KEY_PREFIX: Final[str] = "topologist"

_TRUE_VALUES = frozenset({"true", "yes", "1", "on"})
_FALSE_VALUES = frozenset({"false", "no", "0", "off", ""})


class StateBackendKind(StrEnum):
    """Persisted-state backend variants selectable from configuration."""

    FILE = "default"
    REDIS = "redis"
    DATABASE = "database"

    @classmethod
    def parse(cls, value: str) -> StateBackendKind:
        normalized = value.strip().lower()
        if normalized == "file":
            return cls.FILE
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(f"{value} Unknown state processor provided.") from None


def _parse_flag(name: str, value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def _parse_port(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        port = int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid port for {REDIS_PORT_CONFIG}: {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range for {REDIS_PORT_CONFIG}: {port}")
    return port


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Fully-resolved configuration for one reconciliation run."""

    brokers: str | None = None
    client_config_file: Path | None = None
    allow_delete: bool = False
    dry_run: bool = False
    quiet: bool = False
    state_backend: StateBackendKind = StateBackendKind.FILE
    state_file: Path | None = None
    database_uri: str | None = None
    redis_host: str | None = None
    redis_port: int | None = None
    redis_key_prefix: str = DEFAULT_REDIS_KEY_PREFIX
    schema_registry_url: str | None = None
    admin_properties: Mapping[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, object],
        properties: Mapping[str, str] | None = None,
        *,
        storage: StorageConfig | None = None,
    ) -> BuilderConfig:
        """Combine CLI ``options`` with client-config ``properties``.

        Keys under ``topology.builder.`` and the schema registry URL configure the
        tool itself; every other property is forwarded to the Kafka admin client.
        """

        props = dict(properties or {})
        storage_config = storage or get_storage_config()

        state_backend = StateBackendKind.parse(props.get(STATE_PROCESSOR_CONFIG, "default"))
        redis_host = props.get(REDIS_HOST_CONFIG) or None
        redis_port = _parse_port(props.get(REDIS_PORT_CONFIG))
        if state_backend is StateBackendKind.REDIS and (redis_host is None or redis_port is None):
            raise MissingConfigurationError(
                f"Redis state backend requires {REDIS_HOST_CONFIG} and {REDIS_PORT_CONFIG}"
            )

        state_file = props.get(STATE_FILE_CONFIG)
        brokers = options.get(BROKERS_OPTION)
        admin_properties = {
            key: value
            for key, value in props.items()
            if not key.startswith(BUILDER_PREFIX) and key != SCHEMA_REGISTRY_URL_CONFIG
        }
        if brokers:
            admin_properties[BOOTSTRAP_SERVERS_CONFIG] = str(brokers)

        client_config = options.get(CLIENT_CONFIG_OPTION)
        return cls(
            brokers=str(brokers) if brokers else None,
            client_config_file=Path(str(client_config)) if client_config else None,
            allow_delete=_parse_flag(ALLOW_DELETE_OPTION, options.get(ALLOW_DELETE_OPTION)),
            dry_run=_parse_flag(DRY_RUN_OPTION, options.get(DRY_RUN_OPTION)),
            quiet=_parse_flag(QUIET_OPTION, options.get(QUIET_OPTION)),
            state_backend=state_backend,
            state_file=Path(state_file) if state_file else storage_config.state_file_path(),
            database_uri=props.get(DATABASE_URI_CONFIG) or storage_config.database_uri(),
            redis_host=redis_host,
            redis_port=redis_port,
            redis_key_prefix=props.get(REDIS_KEY_PREFIX_CONFIG) or DEFAULT_REDIS_KEY_PREFIX,
            schema_registry_url=props.get(SCHEMA_REGISTRY_URL_CONFIG) or None,
            admin_properties=admin_properties,
        )

    def validate_with(self, topology: Topology) -> None:
        """Raise if the topology needs settings this configuration lacks."""

        if self.schema_registry_url is None and any(
            topic.schemas is not None for topic in topology.topics()
        ):
            raise MissingConfigurationError(
                f"Topology declares schemas but {SCHEMA_REGISTRY_URL_CONFIG} is not configured"
            )
