"""Tests for the descriptor table and value types."""

import pytest

from mac_tune.descriptors import (
    DEFAULT_DESCRIPTORS,
    SettingDescriptor,
    ValueType,
    build_table,
    restart_process_for,
    table_from_dicts,
)
from mac_tune.tests.mocks import validate_golden_data


class TestValueType:

    @pytest.mark.parametrize("flag,expected", [
        ("-string", ValueType.STRING),
        ("-int", ValueType.INTEGER),
        ("-integer", ValueType.INTEGER),
        ("-bool", ValueType.BOOLEAN),
        ("-boolean", ValueType.BOOLEAN),
        ("-float", ValueType.FLOAT),
    ])
    def test_from_flag(self, flag, expected):
        assert ValueType.from_flag(flag) is expected

    def test_canonical_flags(self):
        assert ValueType.INTEGER.flag == "-int"
        assert ValueType.BOOLEAN.flag == "-bool"

    def test_unknown_flag(self):
        with pytest.raises(ValueError):
            ValueType.from_flag("-array")

    @pytest.mark.parametrize("name", ["int", "INT", "integer", " -int "])
    def test_parse_config_names(self, name):
        assert ValueType.parse(name) is ValueType.INTEGER


class TestTable:

    def test_default_table_matches_backup_order(self):
        assert len(DEFAULT_DESCRIPTORS) == 17
        assert DEFAULT_DESCRIPTORS[0] == SettingDescriptor(
            "com.apple.dock", "autohide-time-modifier", ValueType.FLOAT
        )
        assert DEFAULT_DESCRIPTORS[-1].key == "CacheEntries"
        assert DEFAULT_DESCRIPTORS[-1].value_type is ValueType.INTEGER

    def test_duplicates_rejected(self):
        d = SettingDescriptor("com.apple.dock", "mineffect", ValueType.STRING)
        with pytest.raises(ValueError, match="Duplicate"):
            build_table([d, SettingDescriptor("com.apple.dock", "mineffect", ValueType.FLOAT)])

    def test_same_key_in_other_domain_allowed(self):
        table = build_table([
            SettingDescriptor("com.apple.dock", "x", ValueType.STRING),
            SettingDescriptor("com.apple.finder", "x", ValueType.STRING),
        ])
        assert len(table) == 2

    def test_whitespace_rejected(self):
        with pytest.raises(ValueError):
            build_table([SettingDescriptor("/Library/My Prefs/x.plist", "k", ValueType.INTEGER)])

    def test_from_dicts(self):
        table = table_from_dicts([
            {"domain": "com.apple.dock", "key": "autohide-delay", "type": "float"},
            {"domain": "NSGlobalDomain", "key": "NSWindowResizeTime", "type": "-float"},
        ])
        assert [d.key for d in table] == ["autohide-delay", "NSWindowResizeTime"]

    def test_from_dicts_missing_field(self):
        with pytest.raises(ValueError, match="missing 'type'"):
            table_from_dicts([{"domain": "com.apple.dock", "key": "autohide-delay"}])


def test_restart_processes():
    assert restart_process_for("com.apple.dock") == "Dock"
    assert restart_process_for("com.apple.finder") == "Finder"
    assert restart_process_for("NSGlobalDomain") is None


def test_golden_data_consistent():
    assert validate_golden_data() == []
