"""Workflow instance records.

Maps the workflow engine's instance table so the instances that targeted a
content object can be listed by the object's identity.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Index

from workflow_overlay.db.base import Base


class WorkflowInstanceRecord(Base):
    """
    One application of a workflow definition to a content object.

    The target is identified by its base class name and id, so any content
    type can be targeted without a foreign key.
    """
    __tablename__ = "workflow_instances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=True)

    # Workflow
    definition_id = Column(Integer, nullable=True, index=True)
    current_action_id = Column(Integer, nullable=True)
    workflow_status = Column(String(50), nullable=False, default="Active", index=True)

    # Target identity
    target_class = Column(String(255), nullable=False)
    target_id = Column(Integer, nullable=False)

    # Actor who started the workflow
    initiator_id = Column(Integer, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_workflow_instances_target", "target_class", "target_id"),
    )

    def __repr__(self) -> str:
        return f"<WorkflowInstanceRecord {self.target_class}#{self.target_id} [{self.workflow_status}]>"
