"""
Configuration management for mac_tune.

Supports:
- TOML config files
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Config file
3. Defaults
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib

from .descriptors import (
    DEFAULT_DESCRIPTORS,
    SettingDescriptor,
    table_from_dicts,
)


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "mac_tune.toml",
    Path.home() / ".mac_tune" / "config.toml",
    Path.home() / ".config" / "mac_tune" / "config.toml",
]


@dataclass
class VaultSection:
    """Where snapshots are stored."""
    backup_dir: str = "~/.macos_performance_backup"
    extension: str = "plist"

    @property
    def path(self) -> Path:
        return Path(self.backup_dir).expanduser()


@dataclass
class LogSection:
    """Activity log configuration."""
    file: Optional[str] = "/tmp/tune_macos_performance.log"
    quiet: bool = False


@dataclass
class DefaultsSection:
    """How the defaults(1) binary is invoked."""
    command: str = "defaults"
    use_sudo: bool = True
    timeout: int = 30


@dataclass
class Config:
    """Main configuration container."""
    vault: VaultSection = field(default_factory=VaultSection)
    log: LogSection = field(default_factory=LogSection)
    defaults: DefaultsSection = field(default_factory=DefaultsSection)

    # Raw [[descriptors]] entries; empty means the built-in table
    descriptor_entries: List[Dict[str, Any]] = field(default_factory=list)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.

        Returns:
            Config instance with loaded values
        """
        config = cls()

        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        return config

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        for section in ("vault", "log", "defaults"):
            if section in data and not isinstance(data[section], dict):
                raise ValueError(f"[{section}] must be a table")

        # Vault
        if "vault" in data:
            vault = data["vault"]
            config.vault = VaultSection(
                backup_dir=vault.get("backup_dir", config.vault.backup_dir),
                extension=vault.get("extension", config.vault.extension),
            )

        # Log
        if "log" in data:
            log = data["log"]
            log_file = log.get("file", config.log.file)
            config.log = LogSection(
                file=None if log_file == "" else log_file,
                quiet=log.get("quiet", config.log.quiet),
            )

        # defaults(1)
        if "defaults" in data:
            defaults = data["defaults"]
            config.defaults = DefaultsSection(
                command=defaults.get("command", config.defaults.command),
                use_sudo=defaults.get("use_sudo", config.defaults.use_sudo),
                timeout=defaults.get("timeout", config.defaults.timeout),
            )

        # Descriptor table
        if "descriptors" in data:
            config.descriptor_entries = data["descriptors"]

        return config

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        if getattr(args, "backup_dir", None):
            self.vault.backup_dir = args.backup_dir
        if getattr(args, "log_file", None):
            self.log.file = args.log_file
        if getattr(args, "no_sudo", None):
            self.defaults.use_sudo = False
        if getattr(args, "quiet", None):
            self.log.quiet = args.quiet

        return self

    def descriptors(self) -> Tuple[SettingDescriptor, ...]:
        """
        Active descriptor table.

        Raises:
            ValueError: if configured descriptors are invalid
        """
        if not self.descriptor_entries:
            return DEFAULT_DESCRIPTORS
        return table_from_dicts(self.descriptor_entries)

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        expected = [
            ("vault.backup_dir", self.vault.backup_dir, str),
            ("vault.extension", self.vault.extension, str),
            ("log.file", self.log.file, (str, type(None))),
            ("log.quiet", self.log.quiet, bool),
            ("defaults.command", self.defaults.command, str),
            ("defaults.use_sudo", self.defaults.use_sudo, bool),
        ]
        for name, value, types in expected:
            if not isinstance(value, types):
                errors.append(f"{name} has the wrong type: {value!r}")
        if errors:
            return errors

        extension = self.vault.extension
        if not extension or "/" in extension or extension.startswith("."):
            errors.append(f"Invalid backup file extension: {extension!r}")

        if not self.vault.backup_dir:
            errors.append("Backup directory is required")

        if not self.defaults.command:
            errors.append("defaults command is required")
        timeout = self.defaults.timeout
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 1:
            errors.append("defaults timeout must be a positive number of seconds")

        try:
            self.descriptors()
        except ValueError as e:
            errors.append(f"Descriptor table: {e}")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(f"Backups: {self.vault.path}/defaults_backup_*.{self.vault.extension}")
        lines.append(f"Log: {self.log.file or '(none)'}")

        sudo = "sudo " if self.defaults.use_sudo else ""
        lines.append(f"Writes: {sudo}{self.defaults.command} write (timeout {self.defaults.timeout}s)")

        source = "config file" if self.descriptor_entries else "built-in"
        lines.append(f"Descriptors: {len(self.descriptor_entries) or len(DEFAULT_DESCRIPTORS)} ({source})")

        return "\n".join(lines)


EXAMPLE_CONFIG = """# mac_tune Configuration

[vault]
backup_dir = "~/.macos_performance_backup"
extension = "plist"

[log]
file = "/tmp/tune_macos_performance.log"
quiet = false

[defaults]
command = "defaults"
use_sudo = true
timeout = 30

# Replace the built-in table by listing descriptors here.
# type is one of: string, int, bool, float
#
# [[descriptors]]
# domain = "com.apple.dock"
# key = "autohide-delay"
# type = "float"
"""


def create_example_config(path: str = "mac_tune.toml") -> Path:
    """Create example config file."""
    target = Path(path).expanduser()

    if target.exists():
        raise FileExistsError(f"Config file already exists: {path}")

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(EXAMPLE_CONFIG)

    return target
