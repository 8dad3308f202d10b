"""Pytest configuration and shared fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from workflow_overlay.common.config import OverlayConfig
from workflow_overlay.core.config import Settings
from workflow_overlay.core.jobs import ActionProcessingState, ScheduledPublishingGuard
from workflow_overlay.db.base import Base
from workflow_overlay.db.models import WorkflowInstanceRecord  # noqa: F401  registers the table

from tests.factories import FakePage, FakeWorkflowService, create_actor


@pytest.fixture
def workflow_service():
    return FakeWorkflowService()


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def processing_state():
    """A fresh processing state, independent of the process-wide one."""
    return ActionProcessingState()


@pytest.fixture
def job_guard(processing_state):
    return ScheduledPublishingGuard(processing_state)


@pytest.fixture
def editor():
    return create_actor(permissions=["content:edit"])


@pytest.fixture
def workflow_admin():
    return create_actor(permissions=["workflows:*"])


@pytest.fixture
def settings():
    return Settings(absolute_base_url="https://cms.example.com/")


@pytest.fixture
def overlay_config():
    return OverlayConfig()


@pytest.fixture
def db_session():
    """Session on an in-memory SQLite database with all tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
