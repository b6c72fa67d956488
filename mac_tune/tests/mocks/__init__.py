"""
Mock components for testing mac_tune.

These mocks use realistic macOS defaults (golden_data.py) so the vault can
be exercised without a Mac.
"""

from .golden_data import (
    INITIAL_DEFAULTS,
    INITIAL_ABSENT,
    TUNED_DEFAULTS,
    INITIAL_BACKUP_FILE,
    validate_golden_data,
)
from .mock_store import MockPreferenceStore, normalize
from .mock_console import make_console_ui, console_output

__all__ = [
    # Store mock
    'MockPreferenceStore',
    'normalize',
    # Console capture
    'make_console_ui',
    'console_output',
    # Golden data
    'INITIAL_DEFAULTS',
    'INITIAL_ABSENT',
    'TUNED_DEFAULTS',
    'INITIAL_BACKUP_FILE',
    # Validation
    'validate_golden_data',
]
