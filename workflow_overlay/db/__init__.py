"""Persistence for workflow-overlay."""
