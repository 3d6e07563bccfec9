"""Lifecycle owner pairing one backend with one state cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .cache import ClusterState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from topologist.domain.model import AccessBinding
    from topologist.domain.ports import Backend


class BackendController:
    """The only component that drives backend lifecycle calls.

    Constructing a controller with a given backend is where backend selection
    takes effect; everything downstream talks to the controller.
    """

    def __init__(self, backend: Backend, *, state: ClusterState | None = None) -> None:
        self.backend = backend
        self._state = state if state is not None else ClusterState(backend)

    def load(self) -> None:
        self._state.load()

    def flush_and_close(self) -> None:
        self._state.flush_and_close()

    def close(self) -> None:
        """Release the backend without persisting the cache."""
        self.backend.close()

    def add(self, bindings: AccessBinding | Iterable[AccessBinding]) -> None:
        self._state.add(bindings)

    def get_bindings(self) -> set[AccessBinding]:
        return self._state.get_bindings()

    def reset(self) -> None:
        self._state.reset()

    def size(self) -> int:
        return self._state.size()
