"""Tests for TOML configuration."""

from argparse import Namespace
from pathlib import Path

import pytest

from mac_tune.config import Config, create_example_config
from mac_tune.descriptors import DEFAULT_DESCRIPTORS, ValueType


def write_config(tmp_path, text):
    path = tmp_path / "mac_tune.toml"
    path.write_text(text)
    return path


class TestLoad:

    def test_defaults(self):
        config = Config()
        assert config.vault.path == Path.home() / ".macos_performance_backup"
        assert config.vault.extension == "plist"
        assert config.log.file == "/tmp/tune_macos_performance.log"
        assert config.defaults.use_sudo is True
        assert config.descriptors() == DEFAULT_DESCRIPTORS
        assert config.validate() == []

    def test_from_file(self, tmp_path):
        path = write_config(tmp_path, """
[vault]
backup_dir = "/var/backups/mac"
extension = "txt"

[log]
file = ""
quiet = true

[defaults]
use_sudo = false
timeout = 5

[[descriptors]]
domain = "com.apple.dock"
key = "mineffect"
type = "string"

[[descriptors]]
domain = "/Library/Preferences/com.apple.mDNSResponder.plist"
key = "CacheTime"
type = "int"
""")
        config = Config.load(str(path))

        assert config.vault.path == Path("/var/backups/mac")
        assert config.vault.extension == "txt"
        assert config.log.file is None
        assert config.log.quiet is True
        assert config.defaults.use_sudo is False
        assert config.defaults.command == "defaults"
        assert config.defaults.timeout == 5
        assert [(d.key, d.value_type) for d in config.descriptors()] == [
            ("mineffect", ValueType.STRING),
            ("CacheTime", ValueType.INTEGER),
        ]
        assert "Config: " in config.summary()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.load(str(tmp_path / "nope.toml"))

    def test_search_path(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, '[vault]\nextension = "bak"\n')
        monkeypatch.setattr("mac_tune.config.CONFIG_SEARCH_PATHS", [tmp_path / "missing.toml", path])
        assert Config.load().vault.extension == "bak"

    def test_override_from_args(self):
        config = Config().override_from_args(Namespace(
            backup_dir="/tmp/b", log_file="/tmp/l.log", no_sudo=True, quiet=False,
        ))
        assert config.vault.backup_dir == "/tmp/b"
        assert config.log.file == "/tmp/l.log"
        assert config.defaults.use_sudo is False
        assert config.log.quiet is False


class TestValidate:

    def test_bad_values(self, tmp_path):
        path = write_config(tmp_path, """
[vault]
extension = ".plist"

[defaults]
timeout = 0

[[descriptors]]
domain = "com.apple.dock"
key = "persistent-apps"
type = "array"
""")
        errors = Config.load(str(path)).validate()
        assert len(errors) == 3
        assert any("extension" in e for e in errors)
        assert any("timeout" in e for e in errors)
        assert any("array" in e for e in errors)

    def test_duplicate_descriptors(self):
        config = Config(descriptor_entries=[
            {"domain": "com.apple.dock", "key": "mineffect", "type": "string"},
            {"domain": "com.apple.dock", "key": "mineffect", "type": "string"},
        ])
        assert any("Duplicate" in e for e in config.validate())

    def test_descriptor_entry_not_a_table(self, tmp_path):
        path = write_config(tmp_path, 'descriptors = ["com.apple.dock"]\n')
        errors = Config.load(str(path)).validate()
        assert len(errors) == 1
        assert "Descriptor #1 must be a table" in errors[0]

    def test_descriptors_not_an_array(self, tmp_path):
        path = write_config(tmp_path, "descriptors = 5\n")
        errors = Config.load(str(path)).validate()
        assert any("array of tables" in e for e in errors)

    def test_wrong_value_types(self, tmp_path):
        path = write_config(tmp_path, """
[vault]
backup_dir = 5

[log]
file = false

[defaults]
use_sudo = "no"
timeout = true
""")
        errors = Config.load(str(path)).validate()
        assert any("vault.backup_dir" in e for e in errors)
        assert any("log.file" in e for e in errors)
        assert any("defaults.use_sudo" in e for e in errors)

    def test_bool_timeout_rejected(self):
        config = Config()
        config.defaults.timeout = True
        assert any("timeout" in e for e in config.validate())

    def test_section_not_a_table(self, tmp_path):
        path = write_config(tmp_path, 'vault = "~/backups"\n')
        with pytest.raises(ValueError, match=r"\[vault\] must be a table"):
            Config.load(str(path))


class TestExampleConfig:

    def test_created_and_loadable(self, tmp_path):
        path = create_example_config(str(tmp_path / "conf" / "mac_tune.toml"))
        config = Config.load(str(path))
        assert config.validate() == []
        assert config.descriptors() == DEFAULT_DESCRIPTORS

    def test_refuses_overwrite(self, tmp_path):
        path = write_config(tmp_path, "")
        with pytest.raises(FileExistsError):
            create_example_config(str(path))
