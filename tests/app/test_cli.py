from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from topologist import main as main_module
from topologist.app import RunSummary

if TYPE_CHECKING:
    from pathlib import Path


class FakeBuilder:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.closed = False
        self.runs = 0

    def __enter__(self) -> FakeBuilder:
        return self

    def __exit__(self, *_: object) -> None:
        self.closed = True

    def run(self) -> RunSummary:
        self.runs += 1
        if self.error is not None:
            raise self.error
        return RunSummary(actions=0, dry_run=False, bindings=0)


def test_cli_passes_options_to_builder(
    monkeypatch: pytest.MonkeyPatch, descriptor_path: Path, client_config_path: Path
) -> None:
    captured: dict[str, object] = {}
    builder = FakeBuilder()

    def fake_build(topology: str, options: dict[str, object]) -> FakeBuilder:
        captured["topology"] = topology
        captured.update(options)
        return builder

    monkeypatch.setattr(main_module, "build_topology_builder", fake_build)

    main_module.main(
        [
            "--topology",
            str(descriptor_path),
            "--client-config",
            str(client_config_path),
            "--brokers",
            "localhost:9092",
            "--dry-run",
        ]
    )

    assert captured["topology"] == str(descriptor_path)
    assert captured["brokers"] == "localhost:9092"
    assert captured["clientConfig"] == str(client_config_path)
    assert captured["dryRun"] is True
    assert captured["allowDelete"] is False
    assert builder.runs == 1
    assert builder.closed


def test_cli_missing_topology_exits_with_configuration_code(
    tmp_path: Path, client_config_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as excinfo:
        main_module.main(
            [
                "--topology",
                str(tmp_path / "missing.yaml"),
                "--client-config",
                str(client_config_path),
            ]
        )

    assert excinfo.value.code == 2
    assert "Topology file does not exist" in caplog.text


def test_cli_run_failure_exits_with_one(
    monkeypatch: pytest.MonkeyPatch, descriptor_path: Path, client_config_path: Path
) -> None:
    builder = FakeBuilder(error=RuntimeError("broker unreachable"))
    monkeypatch.setattr(
        main_module, "build_topology_builder", lambda *_args, **_kwargs: builder
    )

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(
            ["--topology", str(descriptor_path), "--client-config", str(client_config_path)]
        )

    assert excinfo.value.code == 1
    assert builder.closed


def test_cli_requires_client_config(descriptor_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--topology", str(descriptor_path)])

    assert excinfo.value.code == 2
