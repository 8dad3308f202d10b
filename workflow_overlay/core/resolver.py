"""Resolution of the workflow governing a content object."""

import logging
from typing import Callable, Generic, Optional, Sequence, TypeVar

from .contracts import (
    ContentIdentity,
    WorkflowActionInstance,
    WorkflowApplicableContent,
    WorkflowDefinition,
    WorkflowInstance,
    WorkflowService,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ComputeOnce(Generic[T]):
    """A cell that computes its value on first access and keeps it.

    A computed ``None`` is kept as well; only a new cell recomputes.
    """

    def __init__(self, compute: Callable[[], T]):
        self._compute = compute
        self._resolved = False
        self._value: Optional[T] = None

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def get(self) -> T:
        if not self._resolved:
            self._value = self._compute()
            self._resolved = True
        return self._value


class WorkflowResolver:
    """
    Resolves the workflow for one content object.

    The effective instance is looked up once per resolver; create a new
    resolver (or binding) to look it up again.
    """

    def __init__(self, service: WorkflowService, content: WorkflowApplicableContent):
        """
        Args:
            service: Workflow engine lookups
            content: The content object being resolved
        """
        self.service = service
        self.content = content
        self._instance: ComputeOnce[Optional[WorkflowInstance]] = ComputeOnce(
            self._lookup_instance
        )

    @property
    def identity(self) -> ContentIdentity:
        return ContentIdentity.of(self.content)

    def resolve(self) -> Optional[WorkflowInstance]:
        """The single running instance for the content, or None."""
        return self._instance.get()

    def resolve_definition(self) -> Optional[WorkflowDefinition]:
        """The definition that applies to the content, direct or inherited."""
        return self.service.get_definition_for(self.content)

    def applicable_definitions(self) -> Sequence[WorkflowDefinition]:
        """Direct definition first, then the additional ones, in declared order."""
        return self.service.get_definitions_for(self.content) or []

    def history(self, limit: Optional[int] = None) -> Sequence[WorkflowActionInstance]:
        """Workflow actions taken on the content, most recent first."""
        return self.service.get_workflow_history_for(self.content, limit) or []

    def _lookup_instance(self) -> Optional[WorkflowInstance]:
        instance = self.service.get_workflow_for(self.content)
        if instance is None:
            logger.debug(f"No running workflow for {self.identity}")
        else:
            logger.debug(f"Workflow instance {instance.id} governs {self.identity}")
        return instance
