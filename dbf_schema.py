"""
dBase record schema.

A DBFSchema is the ordered, read-only list of columns of a table. It
clamps each column for its type, assigns byte offsets (the status byte
comes first, so the first field starts at 1), builds one codec per field
and answers name lookups.
"""

from dataclasses import replace
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from dbf_errors import (
    DBFInvalidSchemaError, DBFRangeError, DBFFieldMissingError, DBFTypeMismatchError,
)
from dbf_field import (
    DBF_FIELD_DESCRIPTOR_SIZE, DBFColumn, DBFFieldCodec, FieldContext,
    dbf_column_coerce, dbf_create_codec, dbf_validate_field_name,
)


# Constants
DBF_MAX_FIELDS = 255
DBF_MAX_RECORD_SIZE = 65535
DBF_HEADER_SIZE = 32


FieldKey = Union[int, str]


class DBFSchema:
    """Ordered field descriptors with derived offsets and codecs."""

    def __init__(self, columns: Iterable[DBFColumn]):
        built = []
        offset = 1  # First byte is delete flag
        for column in columns:
            dbf_validate_field_name(column.name)
            column = replace(dbf_column_coerce(column), offset=offset)
            built.append(column)
            offset += column.length

        if not built:
            raise DBFInvalidSchemaError("A table needs at least one field")
        if len(built) > DBF_MAX_FIELDS:
            raise DBFInvalidSchemaError(f"Too many fields: {len(built)} (max {DBF_MAX_FIELDS})")
        if offset > DBF_MAX_RECORD_SIZE:
            raise DBFInvalidSchemaError(f"Record too long: {offset} bytes (max {DBF_MAX_RECORD_SIZE})")

        self._columns: Tuple[DBFColumn, ...] = tuple(built)
        self._codecs: Tuple[DBFFieldCodec, ...] = tuple(dbf_create_codec(c) for c in built)
        self._names = {}
        for i, column in enumerate(built):
            # First match wins on duplicate names
            self._names.setdefault(column.name.upper(), i)
        self.record_length = offset
        self.header_length = DBF_HEADER_SIZE + DBF_FIELD_DESCRIPTOR_SIZE * len(built) + 1

    @property
    def columns(self) -> List[DBFColumn]:
        """Copies of the clamped columns."""
        return [replace(c) for c in self._columns]

    @property
    def field_names(self) -> List[str]:
        return [c.name for c in self._columns]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[DBFColumn]:
        return iter(self.columns)

    def __getitem__(self, key: FieldKey) -> DBFColumn:
        return replace(self._columns[self.field_index(key)])

    def __eq__(self, other) -> bool:
        if not isinstance(other, DBFSchema):
            return NotImplemented
        return self._columns == other._columns

    __hash__ = None

    def __repr__(self) -> str:
        return f"DBFSchema({list(self._columns)!r})"

    def index_of(self, name: str) -> int:
        """Index of the first field called name (case-insensitive), or -1."""
        return self._names.get(name.upper(), -1)

    def last_index_of(self, name: str) -> int:
        """Index of the last field called name (case-insensitive), or -1."""
        key = name.upper()
        for i in range(len(self._columns) - 1, -1, -1):
            if self._columns[i].name.upper() == key:
                return i
        return -1

    def field_index(self, key: FieldKey) -> int:
        """
        Resolve a field index or name to an index.

        Raises:
            DBFRangeError: index out of range
            DBFFieldMissingError: no field with that name
        """
        if isinstance(key, str):
            index = self.index_of(key)
            if index < 0:
                raise DBFFieldMissingError(key)
            return index
        if isinstance(key, bool) or not isinstance(key, int):
            raise DBFTypeMismatchError(f"Field key must be an int or str, got {type(key).__name__}")
        if not 0 <= key < len(self._columns):
            raise DBFRangeError(f"Field index {key} out of range (0..{len(self._columns) - 1})")
        return key

    def offset_of(self, key: FieldKey) -> int:
        return self._columns[self.field_index(key)].offset

    def length_of(self, key: FieldKey) -> int:
        return self._columns[self.field_index(key)].length

    def codec(self, key: FieldKey) -> DBFFieldCodec:
        return self._codecs[self.field_index(key)]

    def has_memo_fields(self) -> bool:
        return any(c.is_memo for c in self._columns)

    # Record (de)serialization
    def read_field(self, record: bytes, key: FieldKey, context: FieldContext) -> Any:
        """Decode one field out of a full record buffer."""
        i = self.field_index(key)
        column = self._columns[i]
        return self._codecs[i].decode(record[column.offset:column.offset + column.length], context)

    def read_record(self, record: bytes, context: FieldContext) -> List[Any]:
        """Decode every field of a full record buffer (status byte included)."""
        return [codec.decode(record[c.offset:c.offset + c.length], context)
                for c, codec in zip(self._columns, self._codecs)]

    def check_values(self, values: Sequence[Any], context: FieldContext) -> None:
        """Validate a full row of values without encoding anything."""
        if len(values) != len(self._columns):
            raise DBFTypeMismatchError(f"Expected {len(self._columns)} values, got {len(values)}")
        for codec, value in zip(self._codecs, values):
            codec.check(value, context)

    def write_field(self, key: FieldKey, value: Any, context: FieldContext) -> bytes:
        """Check and encode one field value."""
        codec = self._codecs[self.field_index(key)]
        codec.check(value, context)
        return codec.encode(value, context)

    def write_record(self, values: Optional[Sequence[Any]], context: FieldContext,
                     status: int) -> bytes:
        """
        Build a full record buffer.

        Args:
            values: One value per field, or None for a blank record
            context: Encoding context
            status: Status byte (0x20 valid, 0x2A deleted)

        Returns:
            record_length bytes
        """
        if values is None:
            return self.blank_record(status)
        self.check_values(values, context)
        buf = bytearray(b' ' * self.record_length)
        buf[0] = status
        for column, codec, value in zip(self._columns, self._codecs, values):
            buf[column.offset:column.offset + column.length] = codec.encode(value, context)
        return bytes(buf)

    def blank_record(self, status: int) -> bytes:
        """A record with every field empty."""
        buf = bytearray(self.record_length)
        buf[0] = status
        for column, codec in zip(self._columns, self._codecs):
            buf[column.offset:column.offset + column.length] = codec.blank()
        return bytes(buf)


__all__ = [
    'DBF_MAX_FIELDS', 'DBF_MAX_RECORD_SIZE', 'DBF_HEADER_SIZE', 'DBFSchema',
]
