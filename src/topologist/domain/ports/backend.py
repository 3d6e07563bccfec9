"""Port for the persisted record of previously-applied bindings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Set

    from topologist.domain.model import AccessBinding


@runtime_checkable
class Backend(Protocol):
    """Durable storage for one tagged collection of access bindings.

    An instance is stateful across a ``create_or_open`` ... ``close`` lifecycle and
    must tolerate being reopened after ``close`` as well as ``close`` being called
    without a prior open.
    """

    def create_or_open(self) -> None: ...

    def save_type(self, type_name: str) -> None: ...

    def save_bindings(self, bindings: Set[AccessBinding]) -> None: ...

    def load(self) -> set[AccessBinding]: ...

    def close(self) -> None: ...
