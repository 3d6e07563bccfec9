"""Diff producer for access-control bindings."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from topologist.domain.model import sorted_bindings
from topologist.domain.plan import ClearBindingsAction, CreateBindingsAction

from .bindings import AclBindingsBuilder

if TYPE_CHECKING:
    from typing import TextIO

    from topologist.domain.model import Topology
    from topologist.domain.plan import ExecutionPlan
    from topologist.domain.ports import ClusterAdmin

log = getLogger(__name__)


class AccessControlManager:
    """Plan binding changes against the set recorded by the previous run.

    The comparison baseline is ``plan.bindings`` (persisted state), not the live
    cluster, so bindings managed outside this tool are never touched.
    """

    def __init__(
        self,
        admin: ClusterAdmin,
        *,
        allow_delete: bool = False,
        builder: AclBindingsBuilder | None = None,
    ) -> None:
        self.admin = admin
        self.allow_delete = allow_delete
        self.builder = builder or AclBindingsBuilder()

    def apply(self, topology: Topology, plan: ExecutionPlan) -> None:
        desired = self.builder.build(topology)
        applied = plan.bindings

        to_create = desired - applied
        if to_create:
            plan.add(CreateBindingsAction(self.admin, frozenset(to_create)))

        to_delete = applied - desired
        if to_delete and self.allow_delete:
            plan.add(ClearBindingsAction(self.admin, frozenset(to_delete)))
        elif to_delete:
            log.info("Keeping %d stale bindings (deletion not allowed)", len(to_delete))

        log.debug(
            "Access control diff: desired=%d applied=%d create=%d delete=%d",
            len(desired),
            len(applied),
            len(to_create),
            len(to_delete) if self.allow_delete else 0,
        )

    def print_current_state(self, sink: TextIO) -> None:
        sink.write("List of ACLs:\n")
        for binding in sorted_bindings(self.admin.list_acls()):
            sink.write(f"  {binding}\n")

    def __repr__(self) -> str:
        return f"AccessControlManager(allow_delete={self.allow_delete})"
