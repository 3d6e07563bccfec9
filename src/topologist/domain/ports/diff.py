"""Contract between diff producers and the execution plan."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import TextIO

    from topologist.domain.model import Topology
    from topologist.domain.plan import ExecutionPlan


@runtime_checkable
class DiffProducer(Protocol):
    """Compares desired state with live or persisted state and appends actions.

    ``apply`` must only append to ``plan``; it never mutates the cluster itself.
    """

    def apply(self, topology: Topology, plan: ExecutionPlan) -> None: ...

    def print_current_state(self, sink: TextIO) -> None: ...
