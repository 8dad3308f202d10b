"""Configuration management for workflow-overlay.

Handles loading and validation of the YAML overlay configuration: the
labels used for the workflow form fields, the tab the fields are placed
on, and the defaults for comment lookup and pending-item links.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_PENDING_ITEMS_PATH = (
    "admin/workflows/WorkflowDefinition/EditForm/field"
)


@dataclass
class LabelConfig:
    """Default texts for the fields and menus contributed to the CMS."""

    applied_workflow: str = "Applied Workflow"
    inherit_from_parent: str = "Inherit from parent"
    additional_workflows: str = "Additional Workflows"
    effective_workflow: str = "Effective Workflow"
    workflow_log: str = "Workflow Log"
    workflow_options: str = "Workflow options"


@dataclass
class OverlayConfig:
    """Top-level configuration for the workflow overlay."""

    labels: LabelConfig = field(default_factory=LabelConfig)
    workflow_tab: str = "Root.Workflow"
    recent_comment_limit: int = 10
    pending_items_path: str = DEFAULT_PENDING_ITEMS_PATH
    apply_permission: str = "workflows:apply"


def parse_label_config(labels_dict: Dict[str, Any]) -> LabelConfig:
    """Parse a labels configuration dictionary.

    Args:
        labels_dict: Labels configuration dictionary

    Returns:
        LabelConfig instance
    """
    defaults = LabelConfig()
    return LabelConfig(
        applied_workflow=labels_dict.get("applied_workflow", defaults.applied_workflow),
        inherit_from_parent=labels_dict.get(
            "inherit_from_parent", defaults.inherit_from_parent
        ),
        additional_workflows=labels_dict.get(
            "additional_workflows", defaults.additional_workflows
        ),
        effective_workflow=labels_dict.get(
            "effective_workflow", defaults.effective_workflow
        ),
        workflow_log=labels_dict.get("workflow_log", defaults.workflow_log),
        workflow_options=labels_dict.get("workflow_options", defaults.workflow_options),
    )


def parse_config(config_dict: Dict[str, Any]) -> OverlayConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        OverlayConfig instance

    Raises:
        ValueError: If recent_comment_limit is not a positive integer
        TypeError: If the labels section is not a mapping
    """
    labels = LabelConfig()
    if "labels" in config_dict:
        labels_dict = config_dict["labels"] or {}
        if not isinstance(labels_dict, dict):
            raise TypeError(
                f"labels must be a mapping, got {type(labels_dict).__name__}"
            )
        labels = parse_label_config(labels_dict)

    limit = config_dict.get("recent_comment_limit", 10)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"recent_comment_limit must be a positive integer, got {limit!r}")

    return OverlayConfig(
        labels=labels,
        workflow_tab=config_dict.get("workflow_tab", "Root.Workflow"),
        recent_comment_limit=limit,
        pending_items_path=config_dict.get("pending_items_path", DEFAULT_PENDING_ITEMS_PATH),
        apply_permission=config_dict.get("apply_permission", "workflows:apply"),
    )


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the YAML root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(config_path: str) -> OverlayConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file

    Returns:
        OverlayConfig instance
    """
    config_dict = load_config(config_path)
    return parse_config(config_dict)


def load_overlay_config(settings) -> OverlayConfig:
    """Load the overlay configuration named by ``settings.config_path``.

    Returns the defaults when no path is configured.
    """
    if not settings.config_path:
        return OverlayConfig()
    return load_typed_config(settings.config_path)
