"""
Settings vault - high-level snapshot operations.

Snapshots live in one directory as `defaults_backup_<YYYYMMDD>_<HHMMSS>.<ext>`.
The directory is append-only: capture adds a file, nothing edits one.
Concurrent vaults on the same directory are not coordinated; callers must
serialize them.
"""

import os
import re
import tempfile
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..descriptors import SettingDescriptor, restart_process_for
from ..errors import MalformedRecordError, NotFoundError, StorageError
from ..preferences.base import PreferenceStore
from . import codec
from .capture import SnapshotCapture
from .models import (
    ID_FORMAT,
    Snapshot,
    SnapshotInfo,
    SnapshotDiff,
    SettingChange,
    RestoreReport,
    RestorePreview,
)
from .restore import SnapshotRestore


LATEST = "latest"

FILE_PREFIX = "defaults_backup_"


@dataclass(frozen=True)
class VaultConfig:
    """Fixed for the lifetime of a vault."""
    backup_dir: Path
    log: Any                               # info/success/warn/error sink
    extension: str = "plist"


SnapshotRef = Union[Snapshot, str]


class SettingsVault:
    """Captures preference snapshots to disk and restores them."""

    def __init__(self, config: VaultConfig, store: PreferenceStore):
        """
        Initialize the vault.

        Args:
            config: Storage directory, file extension and log sink
            store: Preference store to read from and write to
        """
        self.config = config
        self.store = store
        self.log = config.log

        self.backup_dir = Path(config.backup_dir).expanduser()
        self._name_pattern = re.compile(
            rf"^{FILE_PREFIX}(\d{{8}}_\d{{6}})\.{re.escape(config.extension)}$"
        )

        self._capture = SnapshotCapture(store, self.log)
        self._restore = SnapshotRestore(store, self.log)

    def _snapshot_path(self, snapshot_id: str) -> Path:
        """Get path to snapshot file."""
        return self.backup_dir / f"{FILE_PREFIX}{snapshot_id}.{self.config.extension}"

    # =========================================================================
    # Core Operations
    # =========================================================================

    def capture(self, descriptors: Iterable[SettingDescriptor]) -> Snapshot:
        """
        Capture the descriptor table and persist it.

        The file appears under its final name only once fully written.

        Args:
            descriptors: Keys to capture, in table order

        Returns:
            The persisted snapshot

        Raises:
            StorageError: if the snapshot cannot be written
            PreferenceReadError: if the store cannot be queried
        """
        created_at = self._next_capture_time()
        target = self._snapshot_path(created_at.strftime(ID_FORMAT))
        self.log.info(f"Starting backup of macOS defaults settings to {target}...")

        snapshot = self._capture.capture(descriptors, created_at=created_at)
        path = self._persist(snapshot)

        self.log.success(
            f"Backup completed. {len(snapshot.present_records)} setting(s) saved to {path}"
        )
        if snapshot.absent_records:
            self.log.warn(f"{len(snapshot.absent_records)} key(s) were not set and cannot be restored")

        return replace(snapshot, path=path)

    def restore(self, target: SnapshotRef = LATEST, dry_run: bool = False) -> RestoreReport:
        """
        Restore a snapshot.

        Args:
            target: A Snapshot, a snapshot id, or "latest"
            dry_run: If True, only report what would be written

        Returns:
            RestoreReport with details

        Raises:
            NotFoundError: if no snapshot matches target
            StorageError: if the snapshot file cannot be read
        """
        snapshot = self.resolve(target)
        source = snapshot.path or snapshot.id
        self.log.info(f"Restoring macOS defaults settings from {source}...")

        report = self._restore.restore(snapshot, dry_run=dry_run)

        if dry_run:
            return report

        if report.success:
            self.log.success(f"Defaults settings restored from {source}.")
        else:
            self.log.warn(f"Restored {report.restored} setting(s), {report.failed} failed.")
        if report.restored:
            self.log.warn("Some restored changes might require a logout/login or reboot to take full effect.")

        return report

    def preview(self, target: SnapshotRef = LATEST) -> RestorePreview:
        """Compare live values against a snapshot without writing."""
        return self._restore.preview(self.resolve(target))

    # =========================================================================
    # Query Operations
    # =========================================================================

    def resolve(self, target: SnapshotRef) -> Snapshot:
        """
        Turn "latest", an id, or a Snapshot into a Snapshot.

        Raises:
            NotFoundError: if nothing matches
        """
        if isinstance(target, Snapshot):
            return target

        if target == LATEST:
            snapshot = self.latest()
            if snapshot is None:
                raise NotFoundError(
                    f"No backup file found in {self.backup_dir}. Please run with --backup first."
                )
            return snapshot

        snapshot = self.get(target)
        if snapshot is None:
            raise NotFoundError(f"Snapshot '{target}' not found in {self.backup_dir}")
        return snapshot

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        """Get a snapshot by id."""
        path = self._snapshot_paths().get(snapshot_id)
        if path is None:
            return None
        return self._load(snapshot_id, path)

    def latest(self) -> Optional[Snapshot]:
        """
        Most recent snapshot by the capture time in its file name.

        File modification times are ignored; copying a backup around does
        not change which one is latest.
        """
        paths = self._snapshot_paths()
        if not paths:
            return None
        snapshot_id = max(paths)
        return self._load(snapshot_id, paths[snapshot_id])

    def list_snapshots(self) -> List[SnapshotInfo]:
        """
        List all snapshots with summary info.

        Returns:
            List of SnapshotInfo sorted by creation time (newest first)
        """
        snapshots = []

        for snapshot_id, path in sorted(self._snapshot_paths().items(), reverse=True):
            try:
                snapshot = self._load(snapshot_id, path)
            except StorageError as e:
                self.log.warn(str(e))
                continue
            snapshots.append(SnapshotInfo(
                id=snapshot.id,
                created_at=snapshot.created_at,
                path=path,
                record_count=len(snapshot.records),
                rejected_count=len(snapshot.rejected_lines),
            ))

        return snapshots

    def compare(self, id_a: str, id_b: str) -> Optional[SnapshotDiff]:
        """
        Compare two snapshots.

        Returns:
            SnapshotDiff or None if either snapshot doesn't exist
        """
        snap_a = self.get(id_a)
        snap_b = self.get(id_b)

        if snap_a is None or snap_b is None:
            return None

        values_a = snap_a.values()
        values_b = snap_b.values()

        diff = SnapshotDiff(snapshot_a=id_a, snapshot_b=id_b)

        for ident in sorted(set(values_a) | set(values_b)):
            domain, key = ident
            if ident not in values_b:
                diff.only_in_a.append(f"{domain} {key}")
            elif ident not in values_a:
                diff.only_in_b.append(f"{domain} {key}")
            elif values_a[ident] != values_b[ident]:
                diff.changes.append(SettingChange(
                    domain=domain,
                    key=key,
                    current_value=values_a[ident],
                    snapshot_value=values_b[ident],
                    restart_process=restart_process_for(domain),
                ))

        return diff

    # =========================================================================
    # Storage
    # =========================================================================

    def _snapshot_paths(self) -> Dict[str, Path]:
        """{snapshot_id: path} for every well-named file in the directory."""
        if not self.backup_dir.exists():
            return {}

        paths = {}
        try:
            entries = list(self.backup_dir.iterdir())
        except OSError as e:
            raise StorageError(f"Cannot list backup directory {self.backup_dir}: {e}") from e

        for path in entries:
            match = self._name_pattern.match(path.name)
            if not match:
                continue
            try:
                datetime.strptime(match.group(1), ID_FORMAT)
            except ValueError:
                continue
            paths[match.group(1)] = path

        return paths

    def _load(self, snapshot_id: str, path: Path) -> Snapshot:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read backup file {path}: {e}") from e

        records, rejected = codec.loads(text)
        return Snapshot(
            id=snapshot_id,
            created_at=datetime.strptime(snapshot_id, ID_FORMAT),
            records=tuple(records),
            path=path,
            rejected_lines=tuple(rejected),
        )

    def _next_capture_time(self) -> datetime:
        """Now, or one second past the newest snapshot if the clock hasn't moved on."""
        now = datetime.now().replace(microsecond=0)
        paths = self._snapshot_paths()
        if paths:
            newest = datetime.strptime(max(paths), ID_FORMAT)
            if newest >= now:
                now = newest + timedelta(seconds=1)
        return now

    def _persist(self, snapshot: Snapshot) -> Path:
        """Write snapshot to a temp file, fsync, then rename into place."""
        path = self._snapshot_path(snapshot.id)

        try:
            contents = codec.dumps(snapshot.records)
        except MalformedRecordError as e:
            raise StorageError(f"Cannot serialize snapshot {snapshot.id}: {e}") from e

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create backup directory {self.backup_dir}: {e}") from e

        if path.exists():
            raise StorageError(f"Backup file already exists: {path}")

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.backup_dir,
                prefix=f".{FILE_PREFIX}",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(contents)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write backup file {path}: {e}") from e

        return path
