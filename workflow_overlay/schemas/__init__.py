"""Presentation schemas for workflow-overlay."""

from .actions import ActionGroup, ActionItem, ActionKind, WorkflowActions
from .fields import (
    CompositeField,
    DropdownField,
    FieldList,
    FormAction,
    FormField,
    HiddenField,
    ListboxField,
    ReadonlyField,
    Tab,
    TabSet,
    WorkflowLogField,
)

__all__ = [
    "ActionGroup",
    "ActionItem",
    "ActionKind",
    "CompositeField",
    "DropdownField",
    "FieldList",
    "FormAction",
    "FormField",
    "HiddenField",
    "ListboxField",
    "ReadonlyField",
    "Tab",
    "TabSet",
    "WorkflowActions",
    "WorkflowLogField",
]
