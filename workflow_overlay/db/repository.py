"""Queries over workflow instance records."""

from typing import Any, Dict, List

from sqlalchemy import and_
from sqlalchemy.orm import Session

from workflow_overlay.core.contracts import ContentIdentity
from workflow_overlay.db.models import WorkflowInstanceRecord


class WorkflowInstanceRepository:
    """Lists the workflow instances recorded against content objects."""

    def __init__(self, db: Session):
        self.db = db

    def for_target(self, identity: ContentIdentity) -> List[WorkflowInstanceRecord]:
        """All instances whose target matches the identity, oldest first."""
        return self.db.query(WorkflowInstanceRecord).filter(
            and_(
                WorkflowInstanceRecord.target_class == identity.target_class,
                WorkflowInstanceRecord.target_id == identity.target_id,
            )
        ).order_by(WorkflowInstanceRecord.created_at.asc(), WorkflowInstanceRecord.id.asc()).all()


def record_to_dict(record: WorkflowInstanceRecord) -> Dict[str, Any]:
    """Convert a WorkflowInstanceRecord to a dictionary for the workflow log."""
    return {
        "id": record.id,
        "title": record.title,
        "definition_id": record.definition_id,
        "workflow_status": record.workflow_status,
        "target_class": record.target_class,
        "target_id": record.target_id,
        "initiator_id": record.initiator_id,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
