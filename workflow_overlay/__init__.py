"""Workflow overlay for content objects.

Resolves the workflow governing a content object, overrides its edit and
publish authorization, and builds the workflow actions shown to editors.
"""

from workflow_overlay.core.binding import ApplicabilityBinding
from workflow_overlay.core.jobs import ActionProcessingState, ScheduledPublishingGuard

__all__ = [
    "ActionProcessingState",
    "ApplicabilityBinding",
    "ScheduledPublishingGuard",
]
