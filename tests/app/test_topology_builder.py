from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from tests.helpers.fakes import (
    FakeBackend,
    FakeClusterAdmin,
    FakeSchemaRegistry,
    RecordingDiffProducer,
)
from topologist.adapters.backends import FileBackend, RedisBackend, SqlAlchemyBackend
from topologist.app import (
    TopologyBuilder,
    build_backend_controller,
    build_topology_builder,
    verify_required_parameters,
)
from topologist.config import BuilderConfig, MissingConfigurationError, StateBackendKind
from topologist.domain.errors import TopologyValidationError
from topologist.domain.plan import ExecutionPlan
from topologist.domain.state import BackendController

if TYPE_CHECKING:
    from collections.abc import Callable


class AdminFactory:
    def __init__(self, admin: FakeClusterAdmin | None = None) -> None:
        self.admin = admin or FakeClusterAdmin()
        self.calls = 0

    def __call__(self, config: BuilderConfig) -> FakeClusterAdmin:
        del config
        self.calls += 1
        return self.admin


def _registry_factory(registry: FakeSchemaRegistry) -> Callable[[str], FakeSchemaRegistry]:
    def factory(url: str) -> FakeSchemaRegistry:
        del url
        return registry

    return factory


def _install_recorders(builder: TopologyBuilder) -> tuple[RecordingDiffProducer, ...]:
    journal: list[str] = []
    topics = RecordingDiffProducer("topics", journal)
    acls = RecordingDiffProducer("acls", journal)
    builder.topic_manager = topics
    builder.access_control_manager = acls
    return topics, acls


def test_missing_topology_path_fails_before_anything_else(
    tmp_path: Path, cli_options: dict[str, object]
) -> None:
    admin_factory = AdminFactory()

    with pytest.raises(MissingConfigurationError, match="Topology file does not exist"):
        build_topology_builder(
            tmp_path / "fileThatDoesNotExist.yaml", cli_options, admin_factory=admin_factory
        )

    assert admin_factory.calls == 0


def test_missing_client_config_fails(
    descriptor_path: Path, cli_options: dict[str, object]
) -> None:
    cli_options["clientConfig"] = "/fooBar"
    admin_factory = AdminFactory()

    with pytest.raises(MissingConfigurationError, match="Client config file does not exist"):
        build_topology_builder(descriptor_path, cli_options, admin_factory=admin_factory)

    assert admin_factory.calls == 0


def test_verify_required_parameters_ok(descriptor_path: Path, client_config_path: Path) -> None:
    verify_required_parameters(descriptor_path, str(client_config_path))

    with pytest.raises(MissingConfigurationError, match="clientConfig"):
        verify_required_parameters(descriptor_path, None)


def test_invalid_topology_is_rejected_before_admin_client(
    tmp_path: Path, cli_options: dict[str, object]
) -> None:
    descriptor = tmp_path / "bad.yaml"
    descriptor.write_text(
        "context: ctx\n"
        "projects:\n"
        "  - name: p\n"
        "    consumers: [{principal: nobody}]\n"
        "    topics: [{name: 'bad name'}]\n"
    )
    admin_factory = AdminFactory()

    with pytest.raises(TopologyValidationError) as excinfo:
        build_topology_builder(descriptor, cli_options, admin_factory=admin_factory)

    assert len(excinfo.value.findings) == 2
    assert admin_factory.calls == 0


def test_schemas_without_registry_url_are_rejected(data_dir: Path, tmp_path: Path) -> None:
    client_config = tmp_path / "client.properties"
    client_config.write_text("bootstrap.servers=localhost:9092\n")

    with pytest.raises(MissingConfigurationError, match="schema.registry.url"):
        build_topology_builder(
            data_dir / "descriptor-with-schemas.yaml",
            {"clientConfig": str(client_config)},
            admin_factory=AdminFactory(),
        )


def test_close_releases_admin_exactly_once(
    descriptor_path: Path, cli_options: dict[str, object]
) -> None:
    admin_factory = AdminFactory()
    registry = FakeSchemaRegistry()
    builder = build_topology_builder(
        descriptor_path,
        cli_options,
        admin_factory=admin_factory,
        schema_registry_factory=_registry_factory(registry),
    )

    builder.close()
    builder.close()

    assert admin_factory.admin.close_count == 1
    assert registry.closed


def test_admin_closed_when_wiring_fails(
    descriptor_path: Path, cli_options: dict[str, object]
) -> None:
    admin_factory = AdminFactory()

    def broken_registry(url: str) -> FakeSchemaRegistry:
        raise RuntimeError(f"cannot reach {url}")

    with pytest.raises(RuntimeError, match="cannot reach"):
        build_topology_builder(
            descriptor_path,
            cli_options,
            admin_factory=admin_factory,
            schema_registry_factory=broken_registry,
        )

    assert admin_factory.admin.close_count == 1


def test_run_invokes_each_producer_once_then_reports(
    descriptor_path: Path, cli_options: dict[str, object], fake_backend: FakeBackend
) -> None:
    output = io.StringIO()
    builder = build_topology_builder(
        descriptor_path,
        cli_options,
        admin_factory=AdminFactory(),
        schema_registry_factory=_registry_factory(FakeSchemaRegistry()),
        controller_factory=lambda _config: BackendController(fake_backend),
        output=output,
    )
    topics, acls = _install_recorders(builder)

    with builder:
        summary = builder.run()

    assert topics.journal == ["topics", "acls"]
    assert (topics.apply_calls, acls.apply_calls) == (1, 1)
    assert (topics.print_calls, acls.print_calls) == (1, 1)
    assert output.getvalue() == "state of topics\nstate of acls\n"
    assert summary.dry_run is False
    assert summary.actions == 0



def test_failing_producer_releases_backend(
    descriptor_path: Path, cli_options: dict[str, object], fake_backend: FakeBackend
) -> None:
    admin_factory = AdminFactory()
    builder = build_topology_builder(
        descriptor_path,
        cli_options,
        admin_factory=admin_factory,
        schema_registry_factory=_registry_factory(FakeSchemaRegistry()),
        controller_factory=lambda _config: BackendController(fake_backend),
        output=io.StringIO(),
    )
    topics, acls = _install_recorders(builder)
    topics.error = RuntimeError("cluster unreachable")

    with pytest.raises(RuntimeError, match="cluster unreachable"), builder:
        builder.run()

    assert acls.apply_calls == 0
    assert fake_backend.calls == ["create_or_open", "load", "close"]
    assert admin_factory.admin.close_count == 1


@pytest.mark.parametrize("flag", ["dryRun", "quiet"])
def test_dry_run_and_quiet_suppress_the_report(
    descriptor_path: Path, cli_options: dict[str, object], fake_backend: FakeBackend, flag: str
) -> None:
    cli_options[flag] = "true"
    output = io.StringIO()
    builder = build_topology_builder(
        descriptor_path,
        cli_options,
        admin_factory=AdminFactory(),
        schema_registry_factory=_registry_factory(FakeSchemaRegistry()),
        controller_factory=lambda _config: BackendController(fake_backend),
        output=output,
    )
    topics, acls = _install_recorders(builder)

    with builder:
        builder.run()

    assert (topics.print_calls, acls.print_calls) == (0, 0)
    assert output.getvalue() == ""
    if flag == "dryRun":
        assert "save_bindings" not in fake_backend.calls


def test_redis_backend_run_opens_store_twice(descriptor_path: Path, data_dir: Path) -> None:
    options = {
        "brokers": "localhost:9092",
        "clientConfig": str(data_dir / "client-config-redis.properties"),
        "allowDelete": "false",
        "dryRun": "false",
        "quiet": "false",
    }
    builder = build_topology_builder(
        descriptor_path,
        options,
        admin_factory=AdminFactory(),
        schema_registry_factory=_registry_factory(FakeSchemaRegistry()),
        output=io.StringIO(),
    )
    assert builder.config.state_backend is StateBackendKind.REDIS
    topics, acls = _install_recorders(builder)
    state_processor = FakeBackend()
    plan = ExecutionPlan.init(BackendController(state_processor), io.StringIO())

    with builder:
        builder.run(plan)

    assert state_processor.count("create_or_open") == 2
    assert (topics.apply_calls, acls.apply_calls) == (1, 1)


def test_full_run_is_idempotent(descriptor_path: Path, cli_options: dict[str, object]) -> None:
    admin = FakeClusterAdmin()

    def run_once() -> int:
        output = io.StringIO()
        with build_topology_builder(
            descriptor_path,
            cli_options,
            admin_factory=AdminFactory(admin),
            schema_registry_factory=_registry_factory(FakeSchemaRegistry()),
            output=output,
        ) as builder:
            summary = builder.run()
        assert "List of Topics:" in output.getvalue()
        assert "List of ACLs:" in output.getvalue()
        return summary.actions

    first = run_once()
    second = run_once()

    assert first > 0
    assert second == 0
    assert set(admin.topics) == {
        "contextOrg.source.foo.foo",
        "contextOrg.source.foo.bar.avro",
        "contextOrg.source.bar.bar",
    }
    assert admin.calls.index("create_topic") < admin.calls.index("create_acls")


@pytest.mark.parametrize(
    ("kind", "backend_type"),
    [
        (StateBackendKind.FILE, FileBackend),
        (StateBackendKind.REDIS, RedisBackend),
        (StateBackendKind.DATABASE, SqlAlchemyBackend),
    ],
)
def test_build_backend_controller_selects_variant(
    kind: StateBackendKind, backend_type: type, tmp_path: Path
) -> None:
    config = BuilderConfig(
        state_backend=kind,
        state_file=tmp_path / "state.json",
        database_uri=f"sqlite+pysqlite:///{tmp_path / 'state.db'}",
        redis_host="localhost",
        redis_port=6379,
    )

    controller = build_backend_controller(config)

    assert isinstance(controller.backend, backend_type)


def test_redis_variant_without_host_is_a_configuration_error() -> None:
    with pytest.raises(MissingConfigurationError):
        build_backend_controller(BuilderConfig(state_backend=StateBackendKind.REDIS))
