"""Contracts for the collaborators the overlay consumes.

The workflow engine, the content persistence layer and the scheduled
publishing runner live outside this package. These protocols name the
small set of attributes and calls the overlay relies on.
"""

from typing import (
    Any,
    Iterable,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)


class Actor(Protocol):
    """The member acting in the current request."""

    id: Any
    permissions: Sequence[str]


class Transition(Protocol):
    id: Any
    title: str

    def can_execute(self, instance: "WorkflowInstance") -> bool: ...


class BaseAction(Protocol):
    """Behaviour behind a workflow action; owns side-effecting hooks."""

    def target_updated(self, instance: "WorkflowInstance") -> None: ...


class WorkflowActionInstance(Protocol):
    """One action of a running instance, current or historical."""

    id: Any
    title: str
    comment: Optional[str]

    def valid_transitions(self) -> Iterable[Transition]: ...

    def base_action(self) -> BaseAction: ...


class InitialAction(Protocol):
    title: str


class WorkflowDefinition(Protocol):
    id: Any
    title: str
    initial_action_button_text: Optional[str]

    def initial_action(self) -> Optional[InitialAction]: ...

    def can_workflow_publish(self, actor: Actor, target: Any) -> bool: ...


class WorkflowInstance(Protocol):
    """A running application of a definition to one content object."""

    id: Any
    definition: WorkflowDefinition
    current_action_id: Any

    def current_action(self) -> WorkflowActionInstance: ...

    def can_edit_target(self) -> Optional[bool]: ...

    def can_publish_target(self) -> Optional[bool]: ...

    def can_edit(self) -> bool: ...


class WorkflowService(Protocol):
    """Lookups offered by the workflow engine."""

    def get_workflow_for(self, target: Any) -> Optional[WorkflowInstance]: ...

    def get_definition_for(self, target: Any) -> Optional[WorkflowDefinition]: ...

    def get_definitions_for(self, target: Any) -> Sequence[WorkflowDefinition]: ...

    def get_workflow_history_for(
        self, target: Any, limit: Optional[int] = None
    ) -> Sequence[WorkflowActionInstance]: ...

    def get_definitions(self) -> Sequence[WorkflowDefinition]: ...


class ContentIdentity(NamedTuple):
    """Key used to find the workflow instances targeting a content object."""
    target_class: str
    target_id: Any

    @classmethod
    def of(cls, content: "WorkflowApplicableContent") -> "ContentIdentity":
        return cls(content.base_class(), content.id)

    def __str__(self) -> str:
        return f"{self.target_class}#{self.target_id}"


class WorkflowApplicableContent(Protocol):
    """Content that can have a workflow definition applied to it.

    ``workflow_definition`` is the directly applied definition, if any.
    ``additional_workflow_definitions`` are supplementary definitions whose
    initial actions are offered next to the direct one.
    """

    id: Any
    workflow_definition_id: Any

    def base_class(self) -> str: ...

    def workflow_definition(self) -> Optional[WorkflowDefinition]: ...

    def additional_workflow_definitions(self) -> Sequence[WorkflowDefinition]: ...

    def can_edit(self, actor: Optional[Actor]) -> bool: ...

    def is_archived(self) -> bool: ...


class WorkflowApplicableMixin:
    """Defaults for content classes implementing WorkflowApplicableContent."""

    id: Any = None
    workflow_definition_id: Any = None

    def base_class(self) -> str:
        return type(self).__name__

    def workflow_definition(self):
        return None

    def additional_workflow_definitions(self):
        return []

    def is_archived(self) -> bool:
        return False


@runtime_checkable
class CMSPreviewable(Protocol):
    def cms_edit_link(self) -> Optional[str]: ...


@runtime_checkable
class WorkflowLinkable(Protocol):
    def workflow_link(self) -> Optional[str]: ...
