"""Core workflow overlay: resolution, authorization and workflow actions."""

from .contracts import ContentIdentity, WorkflowApplicableContent, WorkflowApplicableMixin
from .jobs import ActionProcessingState, NullJobGuard, ScheduledPublishingGuard
from .resolver import ComputeOnce, WorkflowResolver
from .overlay import PermissionOverlay
from .menu import TransitionMenuBuilder
from .binding import ApplicabilityBinding

__all__ = [
    "ActionProcessingState",
    "ApplicabilityBinding",
    "ComputeOnce",
    "ContentIdentity",
    "NullJobGuard",
    "PermissionOverlay",
    "ScheduledPublishingGuard",
    "TransitionMenuBuilder",
    "WorkflowApplicableContent",
    "WorkflowApplicableMixin",
    "WorkflowResolver",
]
