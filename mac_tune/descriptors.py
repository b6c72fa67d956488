"""
Descriptor table - which preference keys the vault tracks.

Data-only: the keys, their value types and the processes that must be
relaunched before a changed domain takes effect.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class ValueType(str, Enum):
    """Value types understood by defaults(1)."""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"

    @property
    def flag(self) -> str:
        """Command-line/backup-file spelling, e.g. '-int'."""
        return _FLAGS[self]

    @classmethod
    def from_flag(cls, flag: str) -> "ValueType":
        """Parse a defaults type flag ('-string', '-int', '-integer', ...)."""
        try:
            return _BY_FLAG[flag]
        except KeyError:
            raise ValueError(f"Unknown value type flag: {flag!r}") from None

    @classmethod
    def parse(cls, name: str) -> "ValueType":
        """Parse a type from config: 'int', 'bool', 'float', 'string' or a flag."""
        text = name.strip().lower()
        if text.startswith("-"):
            return cls.from_flag(text)
        return cls.from_flag(f"-{text}")


_FLAGS = {
    ValueType.STRING: "-string",
    ValueType.INTEGER: "-int",
    ValueType.BOOLEAN: "-bool",
    ValueType.FLOAT: "-float",
}

_BY_FLAG = {
    "-string": ValueType.STRING,
    "-int": ValueType.INTEGER,
    "-integer": ValueType.INTEGER,
    "-bool": ValueType.BOOLEAN,
    "-boolean": ValueType.BOOLEAN,
    "-float": ValueType.FLOAT,
}


@dataclass(frozen=True)
class SettingDescriptor:
    """One tracked preference key."""
    domain: str                 # bundle id, NSGlobalDomain, -g or a plist path
    key: str
    value_type: ValueType

    @property
    def ident(self) -> Tuple[str, str]:
        return (self.domain, self.key)

    def __str__(self) -> str:
        return f"{self.domain} {self.key} {self.value_type.flag}"


def build_table(descriptors: Iterable[SettingDescriptor]) -> Tuple[SettingDescriptor, ...]:
    """
    Freeze descriptors into a table.

    Raises:
        ValueError: if a (domain, key) pair appears twice, or either part is
            empty or contains whitespace (it would not fit the backup format)
    """
    table = tuple(descriptors)
    seen = set()
    for descriptor in table:
        for part in (descriptor.domain, descriptor.key):
            if not part or any(c.isspace() for c in part):
                raise ValueError(f"Invalid descriptor field {part!r} in {descriptor}")
        if descriptor.ident in seen:
            raise ValueError(f"Duplicate descriptor: {descriptor.domain} {descriptor.key}")
        seen.add(descriptor.ident)
    return table


def table_from_dicts(entries: List[Dict[str, str]]) -> Tuple[SettingDescriptor, ...]:
    """Build a table from config entries like {"domain": ..., "key": ..., "type": "float"}."""
    if not isinstance(entries, list):
        raise ValueError("descriptors must be an array of tables ([[descriptors]])")

    descriptors = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Descriptor #{i + 1} must be a table, got {entry!r}")
        try:
            descriptors.append(SettingDescriptor(
                domain=str(entry["domain"]),
                key=str(entry["key"]),
                value_type=ValueType.parse(str(entry["type"])),
            ))
        except KeyError as e:
            raise ValueError(f"Descriptor #{i + 1} is missing {e.args[0]!r}") from None
    return build_table(descriptors)


_DNS = "/Library/Preferences/com.apple.mDNSResponder.plist"

DEFAULT_DESCRIPTORS: Tuple[SettingDescriptor, ...] = build_table([
    # UI animations
    SettingDescriptor("com.apple.dock", "autohide-time-modifier", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "autohide-delay", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "expose-animation-duration", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "springboard-show-duration", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "springboard-hide-duration", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "springboard-page-duration", ValueType.FLOAT),
    SettingDescriptor("NSGlobalDomain", "NSAutomaticWindowAnimationsEnabled", ValueType.BOOLEAN),
    SettingDescriptor("com.apple.Mail", "DisableReplyAnimations", ValueType.BOOLEAN),
    SettingDescriptor("com.apple.Mail", "DisableSendAnimations", ValueType.BOOLEAN),
    SettingDescriptor("NSGlobalDomain", "NSWindowResizeTime", ValueType.FLOAT),
    SettingDescriptor("com.apple.finder", "DisableAllAnimations", ValueType.BOOLEAN),
    SettingDescriptor("-g", "QLPanelAnimationDuration", ValueType.FLOAT),
    SettingDescriptor("com.apple.dock", "mineffect", ValueType.STRING),
    SettingDescriptor("NSGlobalDomain", "NSScrollAnimationEnabled", ValueType.BOOLEAN),
    SettingDescriptor("com.apple.universalaccess", "reduceTransparency", ValueType.BOOLEAN),
    # DNS cache
    SettingDescriptor(_DNS, "CacheTime", ValueType.INTEGER),
    SettingDescriptor(_DNS, "CacheEntries", ValueType.INTEGER),
])


# Domains whose owning process only rereads preferences on launch
RESTART_PROCESSES = {
    "com.apple.dock": "Dock",
    "com.apple.finder": "Finder",
    "com.apple.Mail": "Mail",
}


def restart_process_for(domain: str) -> Optional[str]:
    """Process to relaunch for a domain change to take effect, if any."""
    return RESTART_PROCESSES.get(domain)
