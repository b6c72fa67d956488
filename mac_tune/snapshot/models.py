"""
Data models for the snapshot/restore system.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from ..descriptors import SettingDescriptor, restart_process_for


# Snapshot ids are the capture time in this format
ID_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class SettingRecord:
    """One captured observation of a preference key."""
    descriptor: SettingDescriptor
    present_at_capture: bool
    raw_value: Optional[str] = None        # None when absent at capture

    def __post_init__(self):
        if not self.present_at_capture and self.raw_value is not None:
            raise ValueError(f"Absent record for {self.descriptor} cannot carry a value")
        if self.present_at_capture and self.raw_value is None:
            raise ValueError(f"Present record for {self.descriptor} needs a value")

    @classmethod
    def present(cls, descriptor: SettingDescriptor, raw_value: str) -> "SettingRecord":
        return cls(descriptor, True, raw_value)

    @classmethod
    def absent(cls, descriptor: SettingDescriptor) -> "SettingRecord":
        return cls(descriptor, False, None)

    @property
    def domain(self) -> str:
        return self.descriptor.domain

    @property
    def key(self) -> str:
        return self.descriptor.key


@dataclass(frozen=True)
class RejectedLine:
    """A backup file line that could not be parsed."""
    line_number: int
    text: str
    reason: str


@dataclass(frozen=True)
class Snapshot:
    """Preference values at a point in time. Never amended once created."""

    # Identity
    id: str
    created_at: datetime

    records: Tuple[SettingRecord, ...] = ()

    # Set once persisted or when loaded from disk
    path: Optional[Path] = None

    # Lines skipped while loading from disk
    rejected_lines: Tuple[RejectedLine, ...] = ()

    @classmethod
    def create(cls, records: List[SettingRecord], created_at: Optional[datetime] = None) -> "Snapshot":
        """Create a new snapshot with id derived from the capture time."""
        created_at = (created_at or datetime.now()).replace(microsecond=0)
        return cls(
            id=created_at.strftime(ID_FORMAT),
            created_at=created_at,
            records=tuple(records),
        )

    @property
    def present_records(self) -> List[SettingRecord]:
        return [r for r in self.records if r.present_at_capture]

    @property
    def absent_records(self) -> List[SettingRecord]:
        return [r for r in self.records if not r.present_at_capture]

    def values(self) -> dict:
        """{(domain, key): raw_value} for present records."""
        return {(r.domain, r.key): r.raw_value for r in self.present_records}


@dataclass
class SnapshotInfo:
    """Summary info for listing snapshots."""
    id: str
    created_at: datetime
    path: Path
    record_count: int
    rejected_count: int = 0


@dataclass
class SettingChange:
    """A single key whose live value differs from the snapshot."""
    domain: str
    key: str
    current_value: Optional[str]           # None when the key is currently unset
    snapshot_value: str
    restart_process: Optional[str] = None


@dataclass
class RestorePreview:
    """Preview of what restore would change."""
    snapshot_id: str
    changes: List[SettingChange] = field(default_factory=list)
    unchanged: int = 0

    @property
    def total_changes(self) -> int:
        return len(self.changes)

    @property
    def restart_processes(self) -> List[str]:
        return sorted({c.restart_process for c in self.changes if c.restart_process})


@dataclass
class RecordFailure:
    """A record whose write was rejected during restore."""
    domain: str
    key: str
    error: str


@dataclass
class RestoreReport:
    """Outcome of a restore operation."""
    snapshot_id: str
    applied: List[SettingRecord] = field(default_factory=list)
    skipped_absent: List[SettingRecord] = field(default_factory=list)
    failures: List[RecordFailure] = field(default_factory=list)
    malformed: List[RejectedLine] = field(default_factory=list)
    dry_run: bool = False

    @property
    def restored(self) -> int:
        return len(self.applied)

    @property
    def skipped(self) -> int:
        return len(self.skipped_absent)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def restart_processes(self) -> List[str]:
        """Processes to relaunch before the applied values are visible."""
        names = {restart_process_for(r.domain) for r in self.applied}
        return sorted(n for n in names if n)


@dataclass
class SnapshotDiff:
    """Difference between two snapshots."""
    snapshot_a: str
    snapshot_b: str
    changes: List[SettingChange] = field(default_factory=list)
    only_in_a: List[str] = field(default_factory=list)
    only_in_b: List[str] = field(default_factory=list)

    @property
    def total_differences(self) -> int:
        return len(self.changes) + len(self.only_in_a) + len(self.only_in_b)
