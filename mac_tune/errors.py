"""
Error types for the settings vault.

VaultError: base class caught by the CLI
StorageError: snapshot directory/file cannot be created, read or written
NotFoundError: no snapshot to restore
MalformedRecordError: a backup line cannot be parsed
PreferenceReadError: the preference store cannot be queried at all
PreferenceWriteError: the preference store rejected a single write
"""

from typing import Optional


class VaultError(Exception):
    """Base class for settings vault errors."""


class StorageError(VaultError):
    """Snapshot storage cannot be created, read or written."""


class NotFoundError(VaultError):
    """No snapshot exists to resolve."""


class MalformedRecordError(VaultError):
    """A stored backup line does not parse into domain, key, type and value."""

    def __init__(self, reason: str, line: str = "", line_number: Optional[int] = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason} ({line!r})")


class PreferenceReadError(VaultError):
    """The preference store could not be queried."""


class PreferenceWriteError(VaultError):
    """The preference store rejected a write for one key."""

    def __init__(self, domain: str, key: str, detail: str):
        self.domain = domain
        self.key = key
        self.detail = detail
        super().__init__(f"{domain} {key}: {detail}")
