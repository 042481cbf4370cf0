# content_api/configs/__init__.py

"""
Lazy imports - import directly from specific modules to avoid circular dependencies.

This file should remain minimal to prevent import cycles
"""

from content_api.configs.logger import file_logger, redact_email
from content_api.configs.settings import LimiterConfig, Settings, settings

__all__ = [
    "LimiterConfig",
    "Settings",
    "file_logger",
    "redact_email",
    "settings",
]
