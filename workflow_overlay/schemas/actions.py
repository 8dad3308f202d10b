"""Schemas for the workflow actions offered to an editor."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ActionKind(str, Enum):
    """What pressing the action does."""

    TRANSITION = "transition"           # Follow a transition of the running instance
    START_WORKFLOW = "start_workflow"   # Start a definition's initial action


class ActionItem(BaseModel):
    """A single workflow button."""
    name: str
    title: str
    kind: ActionKind
    target_id: Any = None
    extra_classes: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)


class ActionGroup(BaseModel):
    """A named secondary menu of workflow buttons."""
    name: str
    title: Optional[str] = None
    items: List[ActionItem] = Field(default_factory=list)


class WorkflowActions(BaseModel):
    """
    Ordered workflow actions for one content object.

    ``major`` holds the featured start button, if any. ``groups`` are the
    secondary menus, in the order they should be rendered.
    """
    major: Optional[ActionItem] = None
    groups: List[ActionGroup] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items()

    def items(self) -> List[ActionItem]:
        """All actions, the major one first, then each group's in order."""
        items = [self.major] if self.major is not None else []
        for group in self.groups:
            items.extend(group.items)
        return items

    def group(self, name: str) -> Optional[ActionGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None
