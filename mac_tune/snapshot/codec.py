"""
Backup file codec.

One record per line, four fields separated by single spaces:

    com.apple.dock mineffect -string genie

The value is everything after the third space, so it may contain spaces
but never a newline. Absent records have no line.
"""

from typing import Iterable, List, Optional, Tuple

from ..descriptors import SettingDescriptor, ValueType
from ..errors import MalformedRecordError
from .models import RejectedLine, SettingRecord


FIELD_SEPARATOR = " "


def format_line(record: SettingRecord) -> str:
    """
    Serialize a present record to one backup line (no trailing newline).

    Raises:
        MalformedRecordError: if the record cannot be represented on one line
    """
    if not record.present_at_capture:
        raise MalformedRecordError("absent records have no line representation", str(record.descriptor))

    descriptor = record.descriptor
    for name, text in (("domain", descriptor.domain), ("key", descriptor.key)):
        if not text or any(c.isspace() for c in text):
            raise MalformedRecordError(f"{name} must be non-empty without whitespace", text)

    if "\n" in record.raw_value or "\r" in record.raw_value:
        raise MalformedRecordError("value spans several lines", record.raw_value)

    return FIELD_SEPARATOR.join([
        descriptor.domain,
        descriptor.key,
        descriptor.value_type.flag,
        record.raw_value,
    ])


def dumps(records: Iterable[SettingRecord]) -> str:
    """Serialize the present records of a snapshot to file contents."""
    lines = [format_line(r) for r in records if r.present_at_capture]
    return "".join(f"{line}\n" for line in lines)


def parse_line(line: str, line_number: Optional[int] = None) -> SettingRecord:
    """
    Parse one backup line into a present record.

    Raises:
        MalformedRecordError: if the line does not hold domain, key, type and value
    """
    text = line.rstrip("\r\n")
    fields = text.split(FIELD_SEPARATOR, 3)

    if len(fields) < 4:
        raise MalformedRecordError(
            f"expected 4 fields, found {len([f for f in fields if f])}", text, line_number
        )

    domain, key, flag, value = fields
    if not domain or not key or not flag:
        raise MalformedRecordError("empty domain, key or type field", text, line_number)

    try:
        value_type = ValueType.from_flag(flag)
    except ValueError:
        raise MalformedRecordError(f"unknown value type {flag!r}", text, line_number) from None

    return SettingRecord.present(SettingDescriptor(domain, key, value_type), value)


def loads(text: str) -> Tuple[List[SettingRecord], List[RejectedLine]]:
    """
    Parse file contents, keeping good lines and collecting bad ones.

    Blank lines are ignored.

    Returns:
        (records in file order, rejected lines)
    """
    records: List[SettingRecord] = []
    rejected: List[RejectedLine] = []

    for number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            records.append(parse_line(line, number))
        except MalformedRecordError as e:
            rejected.append(RejectedLine(line_number=number, text=e.line, reason=e.reason))

    return records, rejected
