"""Database models for workflow-overlay."""

from workflow_overlay.db.models.workflow_instance import WorkflowInstanceRecord

__all__ = [
    "WorkflowInstanceRecord",
]
