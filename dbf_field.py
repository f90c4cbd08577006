"""
dBase field definitions.

This module holds the field type catalog, the 32-byte field descriptor
layout and one codec per field type. A codec turns the raw bytes of a
field into a Python value and back:

    C  Character       str
    N  Numeric         int (no decimals) or float
    F  Float           int (no decimals) or float
    I  Int32           int
    +  AutoIncrement   int
    O  Double          float
    Y  Currency        decimal.Decimal
    D  Date            datetime.date
    @  Timestamp       datetime.datetime
    T  DateTime        datetime.datetime
    L  Logical         bool
    M  Memo            str (stored in the memo file)
    B  Binary          bytes (stored in the memo file)
    G  Ole             bytes (stored in the memo file)
    0  NullFlags       bytes

An empty field decodes to None for every type except NullFlags.
"""

import datetime
import math
import struct
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from dbf_errors import (
    DBFError, DBFFormatError, DBFInvalidSchemaError,
    DBFTypeMismatchError, DBFDataOverflowError,
)


# Constants
DBF_FIELD_DESCRIPTOR_SIZE = 32
DBF_FIELD_NAME_SIZE = 11
DBF_FIELD_NAME_MAX = 10
JULIAN_DAY_OFFSET = 1721426
TIMESTAMP_EPOCH = datetime.datetime(1, 1, 1)
CURRENCY_QUANTUM = Decimal('0.0001')
# Largest Currency amount: a signed 64-bit count of ten-thousandths
CURRENCY_LIMIT = Decimal('922337203685477.5807')


class DBFFieldType(str, Enum):
    """On-disk field type tags."""
    CHARACTER = 'C'
    NUMERIC = 'N'
    FLOAT = 'F'
    INT32 = 'I'
    DOUBLE = 'O'
    AUTOINCREMENT = '+'
    DATE = 'D'
    TIMESTAMP = '@'
    DATETIME = 'T'
    LOGICAL = 'L'
    MEMO = 'M'
    BINARY = 'B'
    OLE = 'G'
    CURRENCY = 'Y'
    NULLFLAGS = '0'


MEMO_FIELD_TYPES = (DBFFieldType.MEMO, DBFFieldType.BINARY, DBFFieldType.OLE)


# Data structures
@dataclass
class DBFColumn:
    """Represents a column/field in a DBF file."""
    name: str  # Field name (max 10 chars written, 11 read)
    field_type: str  # 'C', 'N', 'L', etc.
    length: int  # Field length in bytes
    decimals: int = 0  # Number of decimal places (for numeric)
    offset: int = 0  # offset within record; first field starts at 1
    # Reserved descriptor bytes, kept as read but never interpreted
    address: int = field(default=0, compare=False)
    work_area_id: int = field(default=0, compare=False)
    set_fields: int = field(default=0, compare=False)
    in_mdx: int = field(default=0, compare=False)

    @property
    def type(self) -> 'DBFFieldType':
        return dbf_field_type(self.field_type)

    @property
    def is_memo(self) -> bool:
        return self.type in MEMO_FIELD_TYPES


@dataclass(frozen=True)
class FieldContext:
    """What a codec needs from its file: text encoding, decimal separator and memo file."""
    encoding: str = 'ascii'
    decimal_separator: str = '.'
    memo: Any = None


def dbf_field_type(tag: Union[str, int, 'DBFFieldType']) -> DBFFieldType:
    """
    Resolve a type tag to a DBFFieldType.

    Args:
        tag: One-character tag, tag byte or DBFFieldType

    Returns:
        The matching DBFFieldType
    """
    if isinstance(tag, DBFFieldType):
        return tag
    if isinstance(tag, int):
        tag = chr(tag)
    try:
        return DBFFieldType(tag.upper())
    except (ValueError, AttributeError):
        raise DBFInvalidSchemaError(f"Unknown field type {tag!r}") from None


def _clamp(value: int, low: int, high: int) -> int:
    if value < low:
        return low
    if value > high:
        return high
    return value


def dbf_column_coerce(column: DBFColumn) -> DBFColumn:
    """
    Return a copy of a column with length and decimals clamped for its type.

    Logical is always 1 byte; Date, Timestamp, Double and Currency are 8;
    Int32 and AutoIncrement are 4; memo references are 10 characters
    unless declared as a 4-byte binary index.
    """
    ftype = dbf_field_type(column.field_type)
    length = column.length
    decimals = column.decimals
    if ftype is DBFFieldType.CHARACTER:
        length, decimals = _clamp(length, 1, 254), 0
    elif ftype in (DBFFieldType.NUMERIC, DBFFieldType.FLOAT):
        length = _clamp(length, 1, 254)
        decimals = _clamp(decimals, 0, length - 1)
    elif ftype in MEMO_FIELD_TYPES:
        length, decimals = (4 if length == 4 else 10), 0
    elif ftype in (DBFFieldType.DOUBLE, DBFFieldType.DATE, DBFFieldType.TIMESTAMP,
                   DBFFieldType.DATETIME, DBFFieldType.CURRENCY):
        length, decimals = 8, 0
    elif ftype in (DBFFieldType.INT32, DBFFieldType.AUTOINCREMENT):
        length, decimals = 4, 0
    elif ftype is DBFFieldType.LOGICAL:
        length, decimals = 1, 0
    elif ftype is DBFFieldType.NULLFLAGS:
        length, decimals = _clamp(length, 1, 254), 0
    return replace(column, field_type=ftype.value, length=length, decimals=decimals)


def dbf_validate_field_name(name: str) -> None:
    """Check that a field name fits the 11-byte ASCII name slot."""
    if not name:
        raise DBFInvalidSchemaError("Field name must not be empty")
    if '\0' in name:
        raise DBFInvalidSchemaError(f"Field name {name!r} contains NUL")
    try:
        encoded = name.encode('ascii')
    except UnicodeEncodeError:
        raise DBFInvalidSchemaError(f"Field name {name!r} is not ASCII") from None
    if len(encoded) > DBF_FIELD_NAME_SIZE:
        raise DBFInvalidSchemaError(f"Field name {name!r} is longer than {DBF_FIELD_NAME_SIZE} bytes")


def pack_field_descriptor(column: DBFColumn) -> bytes:
    """
    Build the 32-byte descriptor of a column.

    Layout: name 0-10 (NUL padded), type 11, address 12-15, length 16,
    decimals 17, work area id 20-21, set fields 23, in MDX 31.
    """
    buf = bytearray(DBF_FIELD_DESCRIPTOR_SIZE)
    name_bytes = column.name.encode('ascii', errors='replace')[:DBF_FIELD_NAME_SIZE]
    buf[:len(name_bytes)] = name_bytes
    buf[11] = ord(column.field_type)
    struct.pack_into("<L", buf, 12, column.address)
    buf[16] = column.length
    buf[17] = column.decimals
    struct.pack_into("<H", buf, 20, column.work_area_id)
    buf[23] = column.set_fields
    buf[31] = column.in_mdx
    return bytes(buf)


def unpack_field_descriptor(buf: bytes) -> DBFColumn:
    """Parse a 32-byte field descriptor."""
    if len(buf) != DBF_FIELD_DESCRIPTOR_SIZE:
        raise DBFFormatError(f"Field descriptor must be 32 bytes, got {len(buf)}")
    name = buf[:DBF_FIELD_NAME_SIZE].split(b'\x00', 1)[0].decode('ascii', errors='replace')
    return DBFColumn(
        name=name,
        field_type=chr(buf[11]),
        length=buf[16],
        decimals=buf[17],
        address=struct.unpack_from("<L", buf, 12)[0],
        work_area_id=struct.unpack_from("<H", buf, 20)[0],
        set_fields=buf[23],
        in_mdx=buf[31],
    )


# Column factories
def _column(name: str, field_type: DBFFieldType, length: int, decimals: int = 0) -> DBFColumn:
    return dbf_column_coerce(DBFColumn(name=name[:DBF_FIELD_NAME_MAX], field_type=field_type.value,
                                       length=length, decimals=decimals))


def dbf_character_column(name: str, length: int = 10) -> DBFColumn:
    return _column(name, DBFFieldType.CHARACTER, length)


def dbf_numeric_column(name: str, length: int = 10, decimals: int = 0) -> DBFColumn:
    return _column(name, DBFFieldType.NUMERIC, length, decimals)


def dbf_float_column(name: str, length: int = 10, decimals: int = 0) -> DBFColumn:
    return _column(name, DBFFieldType.FLOAT, length, decimals)


def dbf_date_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.DATE, 8)


def dbf_timestamp_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.TIMESTAMP, 8)


def dbf_logical_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.LOGICAL, 1)


def dbf_int32_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.INT32, 4)


def dbf_autoincrement_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.AUTOINCREMENT, 4)


def dbf_double_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.DOUBLE, 8)


def dbf_currency_column(name: str) -> DBFColumn:
    return _column(name, DBFFieldType.CURRENCY, 8)


def dbf_memo_column(name: str, length: int = 10) -> DBFColumn:
    return _column(name, DBFFieldType.MEMO, length)


def dbf_binary_column(name: str, length: int = 10) -> DBFColumn:
    return _column(name, DBFFieldType.BINARY, length)


def dbf_ole_column(name: str, length: int = 10) -> DBFColumn:
    return _column(name, DBFFieldType.OLE, length)


# Codecs
_CODECS: Dict[DBFFieldType, Type['DBFFieldCodec']] = {}


def register_codec(codec_class):
    """Class decorator: register a codec for the field types it lists."""
    for field_type in codec_class.field_types:
        _CODECS[field_type] = codec_class
    return codec_class


class DBFFieldCodec:
    """
    Encode/decode the bytes of one field.

    Subclasses list the field types they handle in ``field_types`` and
    override ``decode``, ``encode`` and, when needed, ``check``.
    ``check`` runs before anything is written so a bad value never leaves
    a half-written record behind.
    """

    field_types = ()
    value_types: tuple = ()

    def __init__(self, column: DBFColumn):
        self.name = column.name
        self.field_type = dbf_field_type(column.field_type)
        self.length = column.length
        self.decimals = column.decimals

    def blank(self) -> bytes:
        return b' ' * self.length

    def decode(self, raw: bytes, context: FieldContext) -> Any:
        raise NotImplementedError

    def encode(self, value: Any, context: FieldContext) -> bytes:
        raise NotImplementedError

    def check(self, value: Any, context: FieldContext) -> None:
        if value is None:
            return
        if isinstance(value, bool) and bool not in self.value_types:
            self._mismatch(value)
        if not isinstance(value, self.value_types):
            self._mismatch(value)

    def _mismatch(self, value: Any) -> None:
        raise DBFTypeMismatchError(
            f"Field {self.name} ({self.field_type.value}) cannot store {type(value).__name__} value {value!r}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.length}, {self.decimals})"


@register_codec
class DBFCharacterCodec(DBFFieldCodec):
    field_types = (DBFFieldType.CHARACTER,)
    value_types = (str,)

    def decode(self, raw, context):
        text = raw.strip(b'\x00 ')
        if not text:
            return None
        return text.decode(context.encoding, errors='replace')

    def encode(self, value, context):
        if value is None:
            return self.blank()
        text = value[:self.length]
        data = text.encode(context.encoding, errors='replace')
        # Multi-byte codepages: drop whole characters, never half of one
        while len(data) > self.length:
            text = text[:-1]
            data = text.encode(context.encoding, errors='replace')
        return data.ljust(self.length, b' ')


@register_codec
class DBFNumericCodec(DBFFieldCodec):
    """Space padded ASCII number, right aligned."""

    field_types = (DBFFieldType.NUMERIC, DBFFieldType.FLOAT)
    value_types = (int, float, Decimal)

    def decode(self, raw, context):
        text = raw.strip(b'\x00 ').decode(context.encoding, errors='replace')
        if not text:
            return None
        if context.decimal_separator != '.':
            text = text.replace(context.decimal_separator, '.')
        try:
            if self.decimals == 0:
                try:
                    return int(text)
                except ValueError:
                    return float(text)
            return float(text)
        except ValueError:
            raise DBFFormatError(f"Field {self.name}: invalid number {text!r}") from None

    def format(self, value) -> str:
        finite = value.is_finite() if isinstance(value, Decimal) else isinstance(value, int) or math.isfinite(value)
        if not finite:
            raise DBFDataOverflowError(f"Field {self.name}: {value!r} is not a finite number", value)
        if isinstance(value, int):
            # Formatted without a float round trip; ints may exceed the float range
            text = str(value) + ('.' + '0' * self.decimals if self.decimals else '')
        else:
            text = f"{value:.{self.decimals}f}"
        if len(text) > self.length:
            # Drop fraction digits that do not fit, never integer digits
            dot = text.find('.')
            if not 0 <= dot < self.length:
                raise DBFDataOverflowError(
                    f"Field {self.name}: {text} does not fit in {self.length} characters", value)
            text = text[:self.length].rstrip('.')
        return text.rjust(self.length)

    def check(self, value, context):
        super().check(value, context)
        if value is not None:
            self.format(value)

    def encode(self, value, context):
        if value is None:
            return self.blank()
        text = self.format(value)
        if context.decimal_separator != '.':
            text = text.replace('.', context.decimal_separator)
        return text.encode(context.encoding, errors='replace')


class _BinaryCodec(DBFFieldCodec):
    """Fixed-size little-endian value; a space filled slice is None."""

    def _is_blank(self, raw: bytes) -> bool:
        return raw == self.blank()


@register_codec
class DBFInt32Codec(_BinaryCodec):
    field_types = (DBFFieldType.INT32, DBFFieldType.AUTOINCREMENT)
    value_types = (int,)

    def decode(self, raw, context):
        if self._is_blank(raw):
            return None
        return struct.unpack("<i", raw)[0]

    def check(self, value, context):
        super().check(value, context)
        if value is not None and not -0x80000000 <= value <= 0x7FFFFFFF:
            raise DBFDataOverflowError(f"Field {self.name}: {value} is outside the Int32 range", value)

    def encode(self, value, context):
        if value is None:
            return self.blank()
        return struct.pack("<i", value)


@register_codec
class DBFDoubleCodec(_BinaryCodec):
    field_types = (DBFFieldType.DOUBLE,)
    value_types = (int, float, Decimal)

    def decode(self, raw, context):
        if self._is_blank(raw):
            return None
        return struct.unpack("<d", raw)[0]

    def encode(self, value, context):
        if value is None:
            return self.blank()
        return struct.pack("<d", float(value))


@register_codec
class DBFCurrencyCodec(DBFDoubleCodec):
    """Double on disk, Decimal with four places in Python."""

    field_types = (DBFFieldType.CURRENCY,)

    def check(self, value, context):
        super().check(value, context)
        if value is None:
            return
        amount = Decimal(value)
        if not amount.is_finite() or abs(amount) > CURRENCY_LIMIT:
            raise DBFDataOverflowError(f"Field {self.name}: {value} is outside the Currency range", value)

    def decode(self, raw, context):
        number = super().decode(raw, context)
        if number is None:
            return None
        try:
            return Decimal(repr(number)).quantize(CURRENCY_QUANTUM)
        except InvalidOperation:
            raise DBFFormatError(f"Field {self.name}: invalid currency value {number!r}") from None


@register_codec
class DBFDateCodec(DBFFieldCodec):
    field_types = (DBFFieldType.DATE,)
    value_types = (datetime.date,)

    def decode(self, raw, context):
        text = raw.strip(b'\x00 ')
        if not text or text == b'00000000':
            return None
        if len(text) != 8 or not text.isdigit():
            raise DBFFormatError(f"Field {self.name}: invalid date {text!r}")
        try:
            return datetime.date(int(text[:4]), int(text[4:6]), int(text[6:8]))
        except ValueError:
            raise DBFFormatError(f"Field {self.name}: invalid date {text!r}") from None

    def encode(self, value, context):
        if value is None:
            return self.blank()
        return f"{value.year:04d}{value.month:02d}{value.day:02d}".encode('ascii')


@register_codec
class DBFTimestampCodec(_BinaryCodec):
    """Julian day number and milliseconds since midnight."""

    field_types = (DBFFieldType.TIMESTAMP, DBFFieldType.DATETIME)
    value_types = (datetime.date,)

    def decode(self, raw, context):
        if self._is_blank(raw) or raw == b'\x00' * self.length:
            return None
        day, millis = struct.unpack("<ii", raw)
        try:
            return TIMESTAMP_EPOCH + datetime.timedelta(days=day - JULIAN_DAY_OFFSET, milliseconds=millis)
        except OverflowError:
            raise DBFFormatError(f"Field {self.name}: invalid timestamp ({day}, {millis})") from None

    def encode(self, value, context):
        if value is None:
            return self.blank()
        if not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        delta = value - TIMESTAMP_EPOCH
        millis = delta.seconds * 1000 + delta.microseconds // 1000
        return struct.pack("<ii", JULIAN_DAY_OFFSET + delta.days, millis)


@register_codec
class DBFLogicalCodec(DBFFieldCodec):
    field_types = (DBFFieldType.LOGICAL,)
    value_types = (bool,)

    def decode(self, raw, context):
        flag = chr(raw[0]).upper()
        if flag in ('T', 'Y', '1'):
            return True
        if flag in ('F', 'N', '0'):
            return False
        return None

    def encode(self, value, context):
        if value is None:
            return b'?'
        return b'T' if value else b'F'


class _MemoReferenceCodec(DBFFieldCodec):
    """
    Block index into the memo file.

    A 4-byte field holds a little-endian int, anything else holds the
    index as right-aligned ASCII digits.
    """

    def read_index(self, raw: bytes) -> Optional[int]:
        if raw == self.blank():
            return None
        if self.length == 4:
            index = struct.unpack("<i", raw)[0]
        else:
            text = raw.strip(b'\x00 ')
            if not text:
                return None
            try:
                index = int(text.decode('ascii'))
            except (UnicodeDecodeError, ValueError):
                return None
        return index if index > 0 else None

    def write_index(self, index: int) -> bytes:
        if self.length == 4:
            return struct.pack("<i", index)
        return str(index).rjust(self.length).encode('ascii')

    def decode(self, raw, context):
        if context.memo is None:
            return None
        index = self.read_index(raw)
        if index is None:
            return None
        return self.load(context.memo, index)

    def check(self, value, context):
        super().check(value, context)
        if value is not None and context.memo is None:
            raise DBFError(f"Field {self.name}: no memo file attached")

    def encode(self, value, context):
        if value is None:
            return self.blank()
        return self.write_index(self.store(context.memo, value))

    def load(self, memo, index: int):
        raise NotImplementedError

    def store(self, memo, value) -> int:
        raise NotImplementedError


@register_codec
class DBFMemoCodec(_MemoReferenceCodec):
    field_types = (DBFFieldType.MEMO,)
    value_types = (str,)

    def load(self, memo, index):
        return memo.read_text(index)

    def store(self, memo, value):
        return memo.append_text(value)


@register_codec
class DBFBinaryCodec(_MemoReferenceCodec):
    field_types = (DBFFieldType.BINARY, DBFFieldType.OLE)
    value_types = (bytes, bytearray)

    def load(self, memo, index):
        return memo.read_bytes(index)

    def store(self, memo, value):
        return memo.append_bytes(bytes(value))


@register_codec
class DBFNullFlagsCodec(DBFFieldCodec):
    field_types = (DBFFieldType.NULLFLAGS,)
    value_types = (bytes, bytearray)

    def blank(self):
        return b'\x00' * self.length

    def decode(self, raw, context):
        return bytes(raw)

    def check(self, value, context):
        super().check(value, context)
        if value is not None and len(value) > self.length:
            raise DBFDataOverflowError(f"Field {self.name}: {len(value)} bytes do not fit in {self.length}", value)

    def encode(self, value, context):
        if value is None:
            return self.blank()
        return bytes(value).ljust(self.length, b'\x00')


def dbf_create_codec(column: DBFColumn) -> DBFFieldCodec:
    """
    Build the codec for a column.

    Args:
        column: A coerced column

    Returns:
        Codec instance bound to the column's length and decimals
    """
    ftype = dbf_field_type(column.field_type)
    codec_class = _CODECS.get(ftype)
    if codec_class is None:
        raise DBFInvalidSchemaError(f"No codec for field type {ftype.value!r}")
    return codec_class(column)


# Text conversion
def dbf_format_field_value(column: DBFColumn, value: Any) -> str:
    """
    Format a field value as text.

    Numbers get exactly ``decimals`` fraction digits, dates are yyyyMMdd,
    timestamps ISO 8601, logicals T/F, binary values upper-case hex.
    None formats as an empty string.
    """
    if value is None:
        return ''
    ftype = dbf_field_type(column.field_type)
    if ftype in (DBFFieldType.CHARACTER, DBFFieldType.MEMO):
        return str(value)
    if ftype in (DBFFieldType.NUMERIC, DBFFieldType.FLOAT, DBFFieldType.INT32,
                 DBFFieldType.AUTOINCREMENT, DBFFieldType.DOUBLE):
        return f"{float(value):.{column.decimals}f}"
    if ftype is DBFFieldType.CURRENCY:
        return f"{Decimal(value).quantize(CURRENCY_QUANTUM)}"
    if ftype is DBFFieldType.DATE:
        return f"{value.year:04d}{value.month:02d}{value.day:02d}"
    if ftype in (DBFFieldType.TIMESTAMP, DBFFieldType.DATETIME):
        return value.isoformat()
    if ftype is DBFFieldType.LOGICAL:
        return 'T' if value else 'F'
    return bytes(value).hex().upper()


def dbf_parse_field_value(column: DBFColumn, text: Optional[str]) -> Any:
    """
    Parse text produced by dbf_format_field_value back into a field value.

    Empty text parses as None.
    """
    if text is None or text == '':
        return None
    ftype = dbf_field_type(column.field_type)
    try:
        if ftype in (DBFFieldType.CHARACTER, DBFFieldType.MEMO):
            return text
        if ftype in (DBFFieldType.NUMERIC, DBFFieldType.FLOAT):
            if column.decimals == 0:
                try:
                    return int(text)
                except ValueError:
                    number = float(text)
                    return int(number) if number.is_integer() else number
            return float(text)
        if ftype in (DBFFieldType.INT32, DBFFieldType.AUTOINCREMENT):
            return int(float(text)) if '.' in text else int(text)
        if ftype is DBFFieldType.DOUBLE:
            return float(text)
        if ftype is DBFFieldType.CURRENCY:
            return Decimal(text).quantize(CURRENCY_QUANTUM)
        if ftype is DBFFieldType.DATE:
            if len(text) != 8 or not text.isdigit():
                raise ValueError(text)
            return datetime.date(int(text[:4]), int(text[4:6]), int(text[6:8]))
        if ftype in (DBFFieldType.TIMESTAMP, DBFFieldType.DATETIME):
            return datetime.datetime.fromisoformat(text)
        if ftype is DBFFieldType.LOGICAL:
            flag = text[0].upper()
            if flag in ('T', 'Y', '1'):
                return True
            if flag in ('F', 'N', '0'):
                return False
            if flag == '?':
                return None
            raise ValueError(text)
        return bytes.fromhex(text)
    except (ValueError, InvalidOperation):
        raise DBFFormatError(f"Field {column.name}: cannot parse {text!r} as {ftype.name}") from None


__all__ = [
    'DBF_FIELD_DESCRIPTOR_SIZE', 'DBF_FIELD_NAME_SIZE', 'DBF_FIELD_NAME_MAX',
    'JULIAN_DAY_OFFSET', 'TIMESTAMP_EPOCH',
    'DBFFieldType', 'MEMO_FIELD_TYPES', 'DBFColumn', 'FieldContext',
    'dbf_field_type', 'dbf_column_coerce', 'dbf_validate_field_name',
    'pack_field_descriptor', 'unpack_field_descriptor',
    'dbf_character_column', 'dbf_numeric_column', 'dbf_float_column', 'dbf_date_column',
    'dbf_timestamp_column', 'dbf_logical_column', 'dbf_int32_column', 'dbf_autoincrement_column',
    'dbf_double_column', 'dbf_currency_column', 'dbf_memo_column', 'dbf_binary_column',
    'dbf_ole_column',
    'DBFFieldCodec', 'register_codec', 'dbf_create_codec',
    'dbf_format_field_value', 'dbf_parse_field_value',
]
