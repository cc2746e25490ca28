"""
Utility functions and helpers for pmcsent.

This package provides configuration management, input validation
and exception handling.
"""

from .config import Config, Settings
from .validators import InputValidator
from .exceptions import PMCSentError, ValidationError, ProcessingError

__all__ = [
    "Config",
    "Settings",
    "InputValidator",
    "PMCSentError",
    "ValidationError",
    "ProcessingError",
]
