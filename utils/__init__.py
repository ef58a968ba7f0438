"""
Utility modules for the property wizard.
"""

from .formatting import format_percent, format_step_position
from .config import Config

__all__ = ["format_percent", "format_step_position", "Config"]
