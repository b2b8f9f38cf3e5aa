"""Application configuration utilities."""

from .logging import configure_logging
from .settings import DEFAULT_CHART_LIMIT, Settings, get_settings

__all__ = [
    "DEFAULT_CHART_LIMIT",
    "Settings",
    "configure_logging",
    "get_settings",
]
