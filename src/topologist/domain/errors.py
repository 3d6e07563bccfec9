"""Error kinds raised by the reconciliation core.

Configuration errors live in :mod:`topologist.config.errors`; everything that
can go wrong once configuration is resolved is defined here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from topologist.domain.plan.actions import Action


class TopologyValidationError(ValueError):
    """Raised when the desired-state model fails structural or semantic checks."""

    def __init__(self, findings: Sequence[str]) -> None:
        self.findings = tuple(findings)
        super().__init__("\n".join(self.findings))


class StorageError(RuntimeError):
    """Raised when the persisted-state backend fails to load or save."""


class StorageUnavailableError(StorageError):
    """Raised when the backend medium cannot be reached or created."""


class ClusterAdminError(RuntimeError):
    """Raised when a live-cluster request fails."""


class ExecutionError(RuntimeError):
    """Raised when an action fails while a plan is being applied."""

    def __init__(self, action: Action, cause: BaseException) -> None:
        super().__init__(f"Failed to execute {action.describe()}: {cause}")
        self.action = action
        self.cause = cause


class PlanStateError(RuntimeError):
    """Raised when a closed execution plan is modified or run again."""
