from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from tests.helpers.fakes import FakeBackend, FakeClusterAdmin, FakeRedis
from topologist.config import CLIENT_CONFIG_OPTION, StorageConfig
from topologist.domain.state import BackendController

if TYPE_CHECKING:
    from collections.abc import Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    data_dir = tmp_path / "state"
    monkeypatch.setenv("TOPOLOGIST_DATA_DIR", str(data_dir))
    yield data_dir


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def descriptor_path() -> Path:
    return DATA_DIR / "descriptor.yaml"


@pytest.fixture
def client_config_path() -> Path:
    return DATA_DIR / "client-config.properties"


@pytest.fixture
def cli_options(client_config_path: Path) -> dict[str, object]:
    return {
        "brokers": "localhost:9092",
        CLIENT_CONFIG_OPTION: str(client_config_path),
        "allowDelete": "false",
        "dryRun": "false",
        "quiet": "false",
    }


@pytest.fixture
def storage_config(tmp_path: Path) -> StorageConfig:
    return StorageConfig(data_dir=tmp_path / "storage")


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def controller(fake_backend: FakeBackend) -> BackendController:
    return BackendController(fake_backend)


@pytest.fixture
def fake_admin() -> FakeClusterAdmin:
    return FakeClusterAdmin()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def sink() -> io.StringIO:
    return io.StringIO()
