"""
mac_tune - macOS defaults backup & restore for performance tuning

Snapshots the preference keys that performance tuning changes (UI animation
timings, DNS cache size) so they can be put back exactly as they were.

Usage:
    # As a module
    python -m mac_tune --backup
    python -m mac_tune --restore

    # Programmatically
    from mac_tune import SettingsVault, VaultConfig, DefaultsStore, ConsoleUI
    from mac_tune import DEFAULT_DESCRIPTORS

    vault = SettingsVault(
        VaultConfig(backup_dir=Path("~/.macos_performance_backup"), log=ConsoleUI()),
        DefaultsStore(),
    )
    snapshot = vault.capture(DEFAULT_DESCRIPTORS)
    report = vault.restore("latest")
"""

__version__ = "1.0.0"

# Descriptor table
from .descriptors import SettingDescriptor, ValueType, DEFAULT_DESCRIPTORS

# Vault
from .snapshot import (
    SettingsVault,
    VaultConfig,
    Snapshot,
    SettingRecord,
    RestoreReport,
)

# Preference store
from .preferences import PreferenceStore, DefaultsStore

# Errors
from .errors import (
    VaultError,
    StorageError,
    NotFoundError,
    MalformedRecordError,
    PreferenceReadError,
    PreferenceWriteError,
)

from .ui import ConsoleUI

__all__ = [
    # Version
    "__version__",
    # Descriptors
    "SettingDescriptor",
    "ValueType",
    "DEFAULT_DESCRIPTORS",
    # Vault
    "SettingsVault",
    "VaultConfig",
    "Snapshot",
    "SettingRecord",
    "RestoreReport",
    # Stores
    "PreferenceStore",
    "DefaultsStore",
    # Errors
    "VaultError",
    "StorageError",
    "NotFoundError",
    "MalformedRecordError",
    "PreferenceReadError",
    "PreferenceWriteError",
    # UI
    "ConsoleUI",
]
