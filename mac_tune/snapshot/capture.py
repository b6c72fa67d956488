"""
Snapshot capture - reads the tracked preference keys.
"""

from datetime import datetime
from typing import Iterable, Optional

from ..descriptors import SettingDescriptor
from ..preferences.base import PreferenceStore
from .models import Snapshot, SettingRecord


class SnapshotCapture:
    """Captures preference values for a descriptor table."""

    def __init__(self, store: PreferenceStore, log):
        """
        Initialize snapshot capture.

        Args:
            store: Preference store to read from
            log: Log sink with info/warn methods
        """
        self.store = store
        self.log = log

    def capture(
        self,
        descriptors: Iterable[SettingDescriptor],
        created_at: Optional[datetime] = None,
    ) -> Snapshot:
        """
        Read every descriptor in table order. Nothing is persisted here.

        Args:
            descriptors: Keys to capture
            created_at: Capture time (defaults to now)

        Returns:
            Snapshot holding one record per descriptor

        Raises:
            PreferenceReadError: if the store cannot be queried
        """
        records = [self._capture_one(d) for d in descriptors]
        return Snapshot.create(records, created_at=created_at)

    def _capture_one(self, descriptor: SettingDescriptor) -> SettingRecord:
        found, raw_value = self.store.read(descriptor.domain, descriptor.key)

        if not found:
            self.log.warn(f"Defaults key not found for backup: {descriptor.domain} {descriptor.key}")
            return SettingRecord.absent(descriptor)

        if "\n" in raw_value or "\r" in raw_value:
            self.log.warn(
                f"Value of {descriptor.domain} {descriptor.key} spans several lines "
                f"(not a {descriptor.value_type.value}); it will not be restorable"
            )
            return SettingRecord.absent(descriptor)

        self.log.info(f"Backed up: {descriptor.domain} {descriptor.key} (Value: {raw_value})")
        return SettingRecord.present(descriptor, raw_value)
