"""Common utilities for workflow-overlay."""

from .logger import setup_logger, get_logger
from .config import OverlayConfig, load_config, load_overlay_config
from .urls import join_links

__all__ = [
    "OverlayConfig",
    "get_logger",
    "join_links",
    "load_config",
    "load_overlay_config",
    "setup_logger",
]
