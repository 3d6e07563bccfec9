"""Application orchestration entry points."""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from topologist.adapters.backends import FileBackend, RedisBackend, SqlAlchemyBackend
from topologist.adapters.descriptor import load_topology
from topologist.adapters.kafka import ConfluentClusterAdmin
from topologist.adapters.schema_registry import SchemaRegistryClient
from topologist.config import (
    CLIENT_CONFIG_OPTION,
    BuilderConfig,
    MissingConfigurationError,
    StateBackendKind,
    load_properties,
)
from topologist.domain.access_control import AccessControlManager
from topologist.domain.errors import TopologyValidationError
from topologist.domain.plan import ExecutionPlan
from topologist.domain.state import BackendController
from topologist.domain.topics import TopicManager
from topologist.domain.validation import TopologyValidator

if TYPE_CHECKING:
    from types import TracebackType
    from typing import TextIO

    from topologist.domain.model import Topology
    from topologist.domain.ports import Backend, ClusterAdmin, DiffProducer, SchemaRegistry

type AdminFactory = Callable[[BuilderConfig], ClusterAdmin]
type SchemaRegistryFactory = Callable[[str], SchemaRegistry]
type ControllerFactory = Callable[[BuilderConfig], BackendController]

log = getLogger(__name__)


def _default_admin_factory(config: BuilderConfig) -> ClusterAdmin:
    return ConfluentClusterAdmin(config.admin_properties)


def _default_schema_registry_factory(url: str) -> SchemaRegistry:
    return SchemaRegistryClient(url)


@dataclass(slots=True, frozen=True)
class RunSummary:
    actions: int
    dry_run: bool
    bindings: int


def verify_required_parameters(topology_path: Path, client_config: object) -> None:
    if not topology_path.exists():
        raise MissingConfigurationError(f"Topology file does not exist: {topology_path}")
    if client_config is None:
        raise MissingConfigurationError(f"Missing required option: {CLIENT_CONFIG_OPTION}")
    if not Path(str(client_config)).exists():
        raise MissingConfigurationError(f"Client config file does not exist: {client_config}")


def build_backend(config: BuilderConfig) -> Backend:
    match config.state_backend:
        case StateBackendKind.REDIS:
            if config.redis_host is None or config.redis_port is None:
                raise MissingConfigurationError("Redis state backend requires a host and port")
            return RedisBackend(
                config.redis_host, config.redis_port, key_prefix=config.redis_key_prefix
            )
        case StateBackendKind.DATABASE:
            if config.database_uri is None:
                raise MissingConfigurationError("Database state backend requires a URI")
            return SqlAlchemyBackend(config.database_uri)
        case StateBackendKind.FILE:
            if config.state_file is None:
                raise MissingConfigurationError("File state backend requires a state file")
            return FileBackend(config.state_file)


def build_backend_controller(config: BuilderConfig) -> BackendController:
    backend = build_backend(config)
    log.debug("Using %s state backend: %r", config.state_backend, backend)
    return BackendController(backend)


def _validate(topology: Topology) -> None:
    findings = TopologyValidator().validate(topology)
    if findings:
        raise TopologyValidationError(findings)


class TopologyBuilder:
    """One reconciliation run over an already-validated topology.

    The builder owns the cluster admin client (and the schema registry client, if
    any) and releases them exactly once on :meth:`close`.
    """

    def __init__(
        self,
        topology: Topology,
        config: BuilderConfig,
        admin: ClusterAdmin,
        *,
        schema_registry: SchemaRegistry | None = None,
        controller_factory: ControllerFactory = build_backend_controller,
        output: TextIO | None = None,
    ) -> None:
        self.topology = topology
        self.config = config
        self.admin = admin
        self.schema_registry = schema_registry
        self.controller_factory = controller_factory
        self.output = output or sys.stdout
        self.topic_manager: DiffProducer = TopicManager(
            admin, allow_delete=config.allow_delete, schema_registry=schema_registry
        )
        self.access_control_manager: DiffProducer = AccessControlManager(
            admin, allow_delete=config.allow_delete
        )
        self._closed = False

    def __enter__(self) -> TopologyBuilder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def run(self, plan: ExecutionPlan | None = None) -> RunSummary:
        if plan is None:
            plan = ExecutionPlan.init(self.controller_factory(self.config), self.output)
        log.debug(
            "Running topology builder with topic_manager=%r, access_control_manager=%r, "
            "dry_run=%s, quiet=%s",
            self.topic_manager,
            self.access_control_manager,
            self.config.dry_run,
            self.config.quiet,
        )

        # topics first: bindings may reference topics created in this run
        try:
            self.topic_manager.apply(self.topology, plan)
            self.access_control_manager.apply(self.topology, plan)
        except Exception:
            plan.abandon()
            raise

        plan.run(dry_run=self.config.dry_run)

        if not self.config.quiet and not self.config.dry_run:
            self.topic_manager.print_current_state(self.output)
            self.access_control_manager.print_current_state(self.output)

        summary = RunSummary(
            actions=len(plan.actions),
            dry_run=self.config.dry_run,
            bindings=len(plan.bindings),
        )
        log.info(
            "Finished topology run: actions=%s, dry_run=%s, bindings=%s",
            summary.actions,
            summary.dry_run,
            summary.bindings,
        )
        return summary

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.admin.close()
        finally:
            if self.schema_registry is not None:
                self.schema_registry.close()


def build_topology_builder(
    topology_path: Path | str,
    options: Mapping[str, object],
    *,
    admin_factory: AdminFactory = _default_admin_factory,
    schema_registry_factory: SchemaRegistryFactory = _default_schema_registry_factory,
    controller_factory: ControllerFactory = build_backend_controller,
    output: TextIO | None = None,
) -> TopologyBuilder:
    """Load, validate and wire everything a run needs.

    Configuration and validation errors surface before the cluster admin client
    is created. If a later step fails the admin client is closed before the
    error propagates.
    """

    path = Path(topology_path)
    client_config = options.get(CLIENT_CONFIG_OPTION)
    verify_required_parameters(path, client_config)

    properties = load_properties(Path(str(client_config)))
    config = BuilderConfig.from_options(options, properties)

    topology = load_topology(path)
    _validate(topology)
    config.validate_with(topology)
    log.info(
        "Loaded topology %s with %d projects", topology.namespace, len(topology.projects)
    )

    admin = admin_factory(config)
    try:
        registry = (
            schema_registry_factory(config.schema_registry_url)
            if config.schema_registry_url
            else None
        )
        return TopologyBuilder(
            topology,
            config,
            admin,
            schema_registry=registry,
            controller_factory=controller_factory,
            output=output,
        )
    except BaseException:
        admin.close()
        raise
