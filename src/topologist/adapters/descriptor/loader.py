"""Load a topology from a descriptor file or a directory of descriptors."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import yaml
from pydantic import ValidationError

from topologist.config.errors import MissingConfigurationError
from topologist.domain.errors import TopologyValidationError

from .schema import TopologyDocument
from .translator import to_topology

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from pydantic_core import ErrorDetails

    from topologist.domain.model import Topology

log = getLogger(__name__)

DESCRIPTOR_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})


def _format_error(source: str, error: ErrorDetails) -> str:
    location = ".".join(str(part) for part in error["loc"])
    if location:
        return f"{source}: {location}: {error['msg']}"
    return f"{source}: {error['msg']}"


def descriptor_files(path: Path) -> list[Path]:
    if path.is_file():
        return [path]
    return sorted(
        candidate
        for candidate in path.iterdir()
        if candidate.is_file() and candidate.suffix.lower() in DESCRIPTOR_SUFFIXES
    )


def parse_descriptor(path: Path) -> TopologyDocument:
    """Parse and schema-check one descriptor, reporting every problem at once."""

    try:
        raw: object = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise TopologyValidationError([f"{path.name}: invalid YAML: {exc}"]) from exc
    except UnicodeDecodeError as exc:
        raise TopologyValidationError([f"{path.name}: not valid UTF-8: {exc.reason}"]) from exc
    if not isinstance(raw, dict):
        raise TopologyValidationError([f"{path.name}: descriptor must be a mapping"])

    try:
        return TopologyDocument.model_validate(raw)
    except ValidationError as exc:
        findings = [_format_error(path.name, error) for error in exc.errors()]
        raise TopologyValidationError(findings) from exc


def _merge(files: Sequence[Path]) -> Topology:
    findings: list[str] = []
    topology: Topology | None = None
    for file in files:
        try:
            document = parse_descriptor(file)
        except TopologyValidationError as exc:
            findings.extend(exc.findings)
            continue

        parsed = to_topology(document, base_dir=file.parent)
        if topology is None:
            topology = parsed
        elif parsed.namespace != topology.namespace:
            findings.append(
                f"{file.name}: namespace '{parsed.namespace}' does not match "
                f"'{topology.namespace}'"
            )
        else:
            for project in parsed.projects:
                topology.add_project(project)

    if findings:
        raise TopologyValidationError(findings)
    if topology is None:
        raise TopologyValidationError(["No topology descriptors found"])
    return topology


def load_topology(path: Path) -> Topology:
    if not path.exists():
        raise MissingConfigurationError(f"Topology file does not exist: {path}")

    files = descriptor_files(path)
    if not files:
        raise MissingConfigurationError(f"No topology descriptors (*.yaml, *.yml) in {path}")
    log.debug("Loading topology from %s", ", ".join(file.name for file in files))
    return _merge(files)
