"""Guard against the scheduled publishing job runner.

When the background runner publishes or unpublishes content at its
scheduled time it has to write the object even though a workflow would
normally deny the change. The runner flags the process-wide
ActionProcessingState while it works; the guard turns that flag into an
authorization override for content taking part in scheduled publishing.
"""

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator, Protocol

logger = logging.getLogger(__name__)


class JobConcurrencyGuard(Protocol):
    def is_background_job_processing(self, content: Any) -> bool: ...


class ActionProcessingState:
    """Process-wide record of whether the runner is processing an action.

    The runner must set the flag before it starts mutating content and
    clear it only after it is done; ``processing()`` does both.
    """

    def __init__(self) -> None:
        self._action_is_processing = False

    @property
    def action_is_processing(self) -> bool:
        return self._action_is_processing

    def set_action_is_processing(self, processing: bool) -> None:
        self._action_is_processing = bool(processing)

    @contextmanager
    def processing(self) -> Iterator["ActionProcessingState"]:
        """Flag an action as processing for the duration of the block."""
        self.set_action_is_processing(True)
        try:
            yield self
        finally:
            self.set_action_is_processing(False)


@lru_cache
def get_action_processing_state() -> ActionProcessingState:
    """Return the one ActionProcessingState for this process."""
    return ActionProcessingState()


def participates_in_scheduled_publishing(content: Any) -> bool:
    """Check whether the content is handled by the scheduled publishing runner."""
    return bool(getattr(content, "supports_scheduled_publishing", False))


class ScheduledPublishingGuard:
    """JobConcurrencyGuard backed by an ActionProcessingState."""

    def __init__(self, state: ActionProcessingState):
        self.state = state

    def is_background_job_processing(self, content: Any) -> bool:
        # Content without scheduled publishing can't be touched by the runner
        if not participates_in_scheduled_publishing(content):
            return False

        processing = self.state.action_is_processing
        if processing:
            logger.debug(f"Scheduled publishing job is processing {content!r}")
        return processing


class NullJobGuard:
    """Guard for hosts without a scheduled publishing runner."""

    def is_background_job_processing(self, content: Any) -> bool:
        return False
