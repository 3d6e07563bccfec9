"""Local-file backend: the whole state as one JSON document."""

from __future__ import annotations

import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from topologist.domain.errors import StorageError, StorageUnavailableError

from .schema import StateDocument, build_document

if TYPE_CHECKING:
    from collections.abc import Set

    from topologist.domain.model import AccessBinding

log = getLogger(__name__)


class FileBackend:
    """Persist the tagged binding set to ``path``.

    Writes go to a temporary sibling file that is then renamed over ``path``, so a
    failed save leaves the previous document intact.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._type_name: str | None = None

    def create_or_open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                log.debug("Creating empty state file %s", self.path)
                self._write(StateDocument())
        except (OSError, StorageError) as exc:
            raise StorageUnavailableError(f"Cannot open state file {self.path}: {exc}") from exc

    def save_type(self, type_name: str) -> None:
        self._type_name = type_name

    def save_bindings(self, bindings: Set[AccessBinding]) -> None:
        self._write(build_document(self._type_name, bindings))

    def load(self) -> set[AccessBinding]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return set()
        except UnicodeDecodeError as exc:
            raise StorageError(f"Corrupt state file {self.path}: not valid UTF-8") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read state file {self.path}: {exc}") from exc
        if not raw.strip():
            return set()

        try:
            document = StateDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Corrupt state file {self.path}") from exc
        return {stored.to_domain() for stored in document.bindings}

    def close(self) -> None:
        self._type_name = None

    def _write(self, document: StateDocument) -> None:
        payload = document.model_dump_json(by_alias=True, indent=2)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write state file {self.path}: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write state file {self.path}: {exc}") from exc
