"""In-memory reflection of the persisted binding set."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from topologist.domain.model import AccessBinding

if TYPE_CHECKING:
    from collections.abc import Iterable

    from topologist.domain.ports import Backend

log = getLogger(__name__)

STORE_TYPE: Final[str] = "acls"


class ClusterState:
    """Deduplicated set of bindings hydrated from, and flushed to, a backend.

    The set only grows through :meth:`add` and is only emptied through
    :meth:`reset`. It reflects backend contents once :meth:`load` has run.
    """

    def __init__(self, backend: Backend) -> None:
        self._backend = backend
        self._bindings: set[AccessBinding] = set()

    def add(self, bindings: AccessBinding | Iterable[AccessBinding]) -> None:
        if isinstance(bindings, AccessBinding):
            log.debug("Adding binding %s to the state", bindings)
            self._bindings.add(bindings)
            return
        added = list(bindings)
        log.debug("Adding %d bindings to the state", len(added))
        self._bindings.update(added)

    def get_bindings(self) -> set[AccessBinding]:
        return set(self._bindings)

    def load(self) -> None:
        log.debug("Loading state from %s", type(self._backend).__name__)
        self._backend.create_or_open()
        self._bindings.update(self._backend.load())

    def flush_and_close(self) -> None:
        log.debug(
            "Flushing %d %s to %s",
            len(self._bindings),
            STORE_TYPE,
            type(self._backend).__name__,
        )
        self._backend.create_or_open()
        self._backend.save_type(STORE_TYPE)
        self._backend.save_bindings(frozenset(self._bindings))
        self._backend.close()

    def reset(self) -> None:
        log.debug("Reset the bindings cache")
        self._bindings.clear()

    def size(self) -> int:
        return len(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)
