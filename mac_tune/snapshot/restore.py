"""
Snapshot restore - writes captured values back to the preference store.
"""

from ..descriptors import restart_process_for
from ..errors import PreferenceWriteError
from ..preferences.base import PreferenceStore
from .models import (
    Snapshot,
    RestoreReport,
    RestorePreview,
    RecordFailure,
    SettingChange,
)


class SnapshotRestore:
    """Restores preferences to snapshot state."""

    def __init__(self, store: PreferenceStore, log):
        """
        Initialize snapshot restore.

        Args:
            store: Preference store to write to
            log: Log sink with info/warn/error methods
        """
        self.store = store
        self.log = log

    def restore(self, snapshot: Snapshot, dry_run: bool = False) -> RestoreReport:
        """
        Write every present record back, in stored order.

        Strategy:
        1. Report lines that were rejected when the snapshot was loaded
        2. Skip records that were absent at capture (never delete)
        3. Write present records; a rejected write is recorded and the
           loop moves on to the next record

        Args:
            snapshot: The snapshot to restore
            dry_run: If True, report what would be written without writing

        Returns:
            RestoreReport with per-record outcome
        """
        report = RestoreReport(snapshot_id=snapshot.id, dry_run=dry_run)

        for rejected in snapshot.rejected_lines:
            self.log.warn(f"Skipping malformed line {rejected.line_number} in backup file: {rejected.text}")
            report.malformed.append(rejected)

        for record in snapshot.records:
            descriptor = record.descriptor

            if not record.present_at_capture:
                self.log.info(f"Skipping {descriptor.domain} {descriptor.key}: not set at backup time")
                report.skipped_absent.append(record)
                continue

            if dry_run:
                self.log.info(f"Would restore: defaults write {descriptor} {record.raw_value}")
                report.applied.append(record)
                continue

            self.log.info(f"Restoring: defaults write {descriptor} {record.raw_value}")
            try:
                self.store.write(descriptor.domain, descriptor.key, descriptor.value_type, record.raw_value)
            except PreferenceWriteError as e:
                self.log.error(f"Failed to restore {descriptor.domain} {descriptor.key}: {e.detail}")
                report.failures.append(RecordFailure(descriptor.domain, descriptor.key, e.detail))
                continue

            report.applied.append(record)

        return report

    def preview(self, snapshot: Snapshot) -> RestorePreview:
        """
        Show what would change without applying.

        Args:
            snapshot: The snapshot to compare against

        Returns:
            RestorePreview listing keys whose live value differs
        """
        preview = RestorePreview(snapshot_id=snapshot.id)

        for record in snapshot.present_records:
            found, current = self.store.read(record.domain, record.key)
            current_value = current if found else None

            if current_value == record.raw_value:
                preview.unchanged += 1
                continue

            preview.changes.append(SettingChange(
                domain=record.domain,
                key=record.key,
                current_value=current_value,
                snapshot_value=record.raw_value,
                restart_process=restart_process_for(record.domain),
            ))

        return preview
