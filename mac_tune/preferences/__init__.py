"""
Preference store access.

The vault only talks to a PreferenceStore. DefaultsStore shells out to
macOS defaults(1); tests substitute an in-memory store.
"""

from .base import PreferenceStore
from .defaults import DefaultsStore, restart_process

__all__ = [
    'PreferenceStore',
    'DefaultsStore',
    'restart_process',
]
