"""Single-use execution plan mediating between diff producers and the cluster.

Lifecycle::

    EMPTY -> BUILDING -> PREVIEWED | APPLIED | FAILED

The last three states are closed: the plan rejects further actions and runs.
Every closed state releases the backend opened by :meth:`ExecutionPlan.init`;
only APPLIED persists the applied bindings first.
Persisting the outcome is delegated to the :class:`BackendController`; the plan
itself has no identity across runs.
"""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from topologist.domain.errors import ExecutionError, PlanStateError

if TYPE_CHECKING:
    from typing import TextIO

    from topologist.domain.model import AccessBinding
    from topologist.domain.state import BackendController

    from .actions import Action

log = getLogger(__name__)


class PlanStatus(StrEnum):
    EMPTY = "empty"
    BUILDING = "building"
    PREVIEWED = "previewed"
    APPLIED = "applied"
    FAILED = "failed"

    @property
    def closed(self) -> bool:
        return self in {PlanStatus.PREVIEWED, PlanStatus.APPLIED, PlanStatus.FAILED}


class ExecutionPlan:
    def __init__(
        self,
        controller: BackendController,
        sink: TextIO,
        *,
        bindings: set[AccessBinding] | None = None,
    ) -> None:
        self._controller = controller
        self._sink = sink
        self._actions: list[Action] = []
        self._bindings: set[AccessBinding] = set(bindings or ())
        self._status = PlanStatus.EMPTY

    @classmethod
    def init(cls, controller: BackendController, sink: TextIO) -> ExecutionPlan:
        """Load previously-applied state through ``controller`` and start an empty plan."""

        controller.load()
        return cls(controller, sink, bindings=controller.get_bindings())

    @property
    def status(self) -> PlanStatus:
        return self._status

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self._actions)

    @property
    def bindings(self) -> set[AccessBinding]:
        """Bindings the plan currently treats as applied (a copy)."""

        return set(self._bindings)

    def add(self, action: Action) -> None:
        self._ensure_open()
        self._actions.append(action)
        self._status = PlanStatus.BUILDING

    def run(self, *, dry_run: bool = False) -> None:
        self._ensure_open()
        if dry_run:
            self._preview()
            return
        self._apply()

    def abandon(self) -> None:
        """Close the plan without running it, releasing the backend."""

        if self._status.closed:
            return
        self._status = PlanStatus.FAILED
        self._controller.close()

    def _preview(self) -> None:
        log.info("Dry run: %d actions planned", len(self._actions))
        for action in self._actions:
            self._sink.write(f"{action.describe()}\n")
        self._status = PlanStatus.PREVIEWED
        self._controller.close()

    def _apply(self) -> None:
        log.info("Applying %d actions", len(self._actions))
        applied: set[AccessBinding] = set(self._bindings)
        for action in self._actions:
            try:
                action.run()
            except Exception as exc:
                self.abandon()
                raise ExecutionError(action, exc) from exc
            action.update_state(applied)

        self._bindings = applied
        self._status = PlanStatus.APPLIED
        self._controller.reset()
        self._controller.add(applied)
        self._controller.flush_and_close()

    def _ensure_open(self) -> None:
        if self._status.closed:
            raise PlanStateError(f"Execution plan already {self._status}")
