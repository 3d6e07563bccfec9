"""Execution plan and the actions it carries."""

from __future__ import annotations

from .actions import (
    Action,
    AddPartitionsAction,
    ClearBindingsAction,
    CreateBindingsAction,
    CreateTopicAction,
    DeleteTopicsAction,
    RegisterSchemaAction,
    UpdateTopicConfigAction,
)
from .execution import ExecutionPlan, PlanStatus

__all__ = [
    "Action",
    "AddPartitionsAction",
    "ClearBindingsAction",
    "CreateBindingsAction",
    "CreateTopicAction",
    "DeleteTopicsAction",
    "ExecutionPlan",
    "PlanStatus",
    "RegisterSchemaAction",
    "UpdateTopicConfigAction",
]
