"""
Snapshot/Restore system for mac_tune.

Captures the tracked macOS preference keys before tuning so they can be put
back later. Key features:

- Atomic backup files in the `domain key -type value` line format
- Restore of the latest or a chosen backup, tolerant of bad lines and
  rejected writes
- Dry-run preview before restore

Scope: defaults(1) preference keys only (no sysctl state)
"""

from .models import (
    SettingRecord,
    Snapshot,
    SnapshotInfo,
    RestoreReport,
    RestorePreview,
    SnapshotDiff,
)
from .capture import SnapshotCapture
from .restore import SnapshotRestore
from .manager import SettingsVault, VaultConfig, LATEST

__all__ = [
    'SettingRecord',
    'Snapshot',
    'SnapshotInfo',
    'RestoreReport',
    'RestorePreview',
    'SnapshotDiff',
    'SnapshotCapture',
    'SnapshotRestore',
    'SettingsVault',
    'VaultConfig',
    'LATEST',
]
