"""Utility modules for dmlex.

Provides:
- logger: get_logger for logging
"""

from dmlex.utils.logger import get_logger

__all__ = ["get_logger"]
