"""
UI module - Rich console output for reports and saved state.
"""

from .console import ConsoleUI

__all__ = [
    "ConsoleUI",
]
