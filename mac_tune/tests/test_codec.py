"""Tests for the backup line format."""

import pytest

from mac_tune.descriptors import SettingDescriptor, ValueType
from mac_tune.errors import MalformedRecordError
from mac_tune.snapshot import codec
from mac_tune.snapshot.models import SettingRecord
from mac_tune.tests.mocks import INITIAL_BACKUP_FILE


MINEFFECT = SettingDescriptor("com.apple.dock", "mineffect", ValueType.STRING)


class TestFormat:

    def test_line(self):
        record = SettingRecord.present(MINEFFECT, "genie")
        assert codec.format_line(record) == "com.apple.dock mineffect -string genie"

    def test_absent_records_are_not_written(self):
        records = [
            SettingRecord.present(MINEFFECT, "genie"),
            SettingRecord.absent(SettingDescriptor("com.apple.Foo", "Bar", ValueType.BOOLEAN)),
        ]
        assert codec.dumps(records) == "com.apple.dock mineffect -string genie\n"

    def test_multiline_value_rejected(self):
        record = SettingRecord.present(MINEFFECT, "(\n    a\n)")
        with pytest.raises(MalformedRecordError):
            codec.format_line(record)

    def test_absent_record_has_no_line(self):
        with pytest.raises(MalformedRecordError):
            codec.format_line(SettingRecord.absent(MINEFFECT))


class TestParse:

    def test_line(self):
        record = codec.parse_line("com.apple.dock mineffect -string genie")
        assert record.descriptor == MINEFFECT
        assert record.present_at_capture
        assert record.raw_value == "genie"

    def test_value_keeps_spaces(self):
        record = codec.parse_line("com.apple.finder NewWindowTargetPath -string file:///Users/me/My Projects/ \n")
        assert record.raw_value == "file:///Users/me/My Projects/ "

    def test_empty_value_after_third_space(self):
        record = codec.parse_line("com.apple.dock mineffect -string ")
        assert record.raw_value == ""

    def test_integer_alias(self):
        record = codec.parse_line("/Library/Preferences/com.apple.mDNSResponder.plist CacheTime -integer 3600")
        assert record.descriptor.value_type is ValueType.INTEGER

    @pytest.mark.parametrize("line,reason", [
        ("com.apple.dock mineffect", "expected 4 fields, found 2"),
        ("com.apple.dock mineffect -string", "expected 4 fields, found 3"),
        ("com.apple.dock  mineffect -string genie", "empty domain, key or type field"),
        ("com.apple.dock mineffect -array genie", "unknown value type '-array'"),
    ])
    def test_malformed(self, line, reason):
        with pytest.raises(MalformedRecordError) as exc_info:
            codec.parse_line(line, 7)
        assert exc_info.value.reason == reason
        assert exc_info.value.line_number == 7

    def test_round_trip_preserves_text(self):
        records = [
            SettingRecord.present(MINEFFECT, "  two  spaces "),
            SettingRecord.present(SettingDescriptor("-g", "QLPanelAnimationDuration", ValueType.FLOAT), "0"),
        ]
        parsed, rejected = codec.loads(codec.dumps(records))
        assert parsed == records
        assert rejected == []


class TestLoads:

    def test_file_written_by_shell_script(self):
        records, rejected = codec.loads(INITIAL_BACKUP_FILE)
        assert rejected == []
        assert len(records) == 5
        assert records[2].raw_value == "genie"

    def test_corrupt_line_reported(self):
        text = (
            "com.apple.dock mineffect -string genie\n"
            "garbage line\n"
            "\n"
            "com.apple.dock autohide-delay -float 0.2\n"
        )
        records, rejected = codec.loads(text)
        assert [r.key for r in records] == ["mineffect", "autohide-delay"]
        assert len(rejected) == 1
        assert rejected[0].line_number == 2
        assert rejected[0].text == "garbage line"

    def test_crlf_line_endings(self):
        records, rejected = codec.loads("com.apple.dock mineffect -string genie\r\n")
        assert rejected == []
        assert records[0].raw_value == "genie"
