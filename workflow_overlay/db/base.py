"""Declarative base for workflow-overlay models."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
