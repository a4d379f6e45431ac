"""
Utility helpers shared across dmdialect packages.
"""

from .logging import configure_logging, get_logger, time_call
from .naming import build_key_name, sanitize_identifier

__all__ = ["build_key_name", "configure_logging", "get_logger", "sanitize_identifier", "time_call"]
