"""Edit and publish authorization overrides.

Decisions are taken in a fixed order, the first decisive answer wins:

1. A scheduled publishing job working on the content is always allowed.
2. A running workflow instance decides for its target.
3. Without an instance opinion, the applicable definition decides whether
   the content may be published directly.
4. Otherwise the overlay has no opinion (None) and the host's default
   authorization applies.

None is "no opinion", never a denial.
"""

import logging
from typing import Optional

from .contracts import Actor
from .jobs import JobConcurrencyGuard
from .resolver import WorkflowResolver

logger = logging.getLogger(__name__)


class PermissionOverlay:
    """Authorization decisions for the content behind a resolver."""

    def __init__(self, resolver: WorkflowResolver, guard: JobConcurrencyGuard):
        self.resolver = resolver
        self.guard = guard

    @property
    def content(self):
        return self.resolver.content

    def can_edit(self, actor: Optional[Actor] = None) -> Optional[bool]:
        """Can only edit content that's not held by another workflow step."""
        if self.guard.is_background_job_processing(self.content):
            return True

        active = self.resolver.resolve()
        if active is not None:
            return active.can_edit_target()

        return None

    def can_publish(self, actor: Optional[Actor] = None) -> Optional[bool]:
        """
        Content is never directly publishable while a definition applies,
        unless the definition allows the actor to publish.

        With a running instance it might be publishable, depending on the
        instance's current action.
        """
        if self.guard.is_background_job_processing(self.content):
            return True

        active = self.resolver.resolve()
        if active is not None:
            publish = active.can_publish_target()
            if publish is not None:
                return publish

        definition = self.resolver.resolve_definition()
        if definition is not None:
            if actor is None:
                logger.debug(
                    f"Publishing {self.resolver.identity} denied: no authenticated actor"
                )
                return False
            return definition.can_workflow_publish(actor, self.content)

        return None

    def can_edit_workflow(self) -> bool:
        """Can the actor edit the running workflow itself?"""
        active = self.resolver.resolve()
        if active is not None:
            return bool(active.can_edit())
        return False
