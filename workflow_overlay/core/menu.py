"""Workflow actions visible to the current actor.

With a running instance the actions are the transitions out of its
current action. Without one they are the initial actions of the
definitions that apply: the first becomes the major (featured) action,
the rest are offered in a secondary menu in their declared order.
"""

import logging
from typing import Optional

from workflow_overlay.schemas.actions import (
    ActionGroup,
    ActionItem,
    ActionKind,
    WorkflowActions,
)

from .contracts import Actor, WorkflowDefinition, WorkflowInstance
from .resolver import WorkflowResolver

logger = logging.getLogger(__name__)

WORKFLOW_OPTIONS = "WorkflowOptions"
ADDITIONAL_WORKFLOWS = "AdditionalWorkflows"


def initial_action_label(definition: WorkflowDefinition) -> str:
    """Button text for starting a definition."""
    if definition.initial_action_button_text:
        return definition.initial_action_button_text
    return definition.initial_action().title


class TransitionMenuBuilder:
    """Builds the ordered workflow actions; never changes workflow state."""

    def __init__(self, resolver: WorkflowResolver, options_title: Optional[str] = None):
        self.resolver = resolver
        self.options_title = options_title

    @property
    def content(self):
        return self.resolver.content

    def build_actions(self, actor: Optional[Actor] = None) -> WorkflowActions:
        if self.content.is_archived():
            return WorkflowActions()

        active = self.resolver.resolve()
        if active is not None:
            return self._transition_actions(active)
        return self._initial_actions(actor)

    def _transition_actions(self, active: WorkflowInstance) -> WorkflowActions:
        if not active.can_edit():
            return WorkflowActions()

        # An instance between actions has nothing to transition from
        current = active.current_action()
        if current is None:
            return WorkflowActions()

        group = ActionGroup(name=WORKFLOW_OPTIONS, title=self.options_title)
        for transition in current.valid_transitions():
            if not transition.can_execute(active):
                continue
            group.items.append(ActionItem(
                name=f"updateworkflow-{transition.id}",
                title=transition.title,
                kind=ActionKind.TRANSITION,
                target_id=transition.id,
                attributes={"data-transitionid": str(transition.id)},
            ))

        logger.debug(
            f"{len(group.items)} transition(s) available on {self.resolver.identity}"
        )
        return WorkflowActions(groups=[group])

    def _initial_actions(self, actor: Optional[Actor]) -> WorkflowActions:
        actions = WorkflowActions()
        additional = ActionGroup(name=ADDITIONAL_WORKFLOWS)

        for definition in self.resolver.applicable_definitions():
            if not definition.initial_action() or not self.content.can_edit(actor):
                continue

            item = ActionItem(
                name=f"startworkflow-{definition.id}",
                title=initial_action_label(definition),
                kind=ActionKind.START_WORKFLOW,
                target_id=definition.id,
                extra_classes=["start-workflow", "btn-primary"],
                attributes={"data-workflow": str(definition.id)},
            )

            # The first definition is the main one and is shown as a major action
            if actions.major is None:
                actions.major = item
            else:
                additional.items.append(item)

        if additional.items:
            actions.groups.append(additional)
        return actions
