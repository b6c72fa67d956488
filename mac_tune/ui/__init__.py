"""
UI module for mac_tune.

Provides the Rich console that also serves as the activity log.
"""

from .console import ConsoleUI

__all__ = [
    'ConsoleUI',
]
