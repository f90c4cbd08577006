"""
dBase (.DBF) table files.

This module reads and writes the file header and field descriptors and
provides record level access to an open table: random access get/set of
records and fields, append, insert, soft delete/restore, physical removal
and compaction. Memo, Binary and Ole values go through the companion memo
file (see dbf_memo).
"""

import datetime
import logging
import os
import shutil
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Any, Optional, Union, BinaryIO, Tuple, Iterable, Iterator, Sequence

from dbf_errors import (
    DBFError, DBFFormatError, DBFConsistencyError, DBFRangeError,
    DBFUnsupportedFormatError, DBFTypeMismatchError, DBFFieldMissingError,
)
from dbf_language import (
    DBF_LANG_OEM, DBF_LANG_US, DBF_LANG_WESTERN_EUROPE, DBF_LANG_WINDOWS_ANSI, DBF_LANG_JAPAN,
    dbf_language_get_encoding, dbf_language_get_decimal_separator,
)
from dbf_field import (
    DBF_FIELD_DESCRIPTOR_SIZE, DBFColumn, DBFFieldType, FieldContext,
    pack_field_descriptor, unpack_field_descriptor,
    dbf_character_column, dbf_numeric_column, dbf_float_column, dbf_date_column,
    dbf_timestamp_column, dbf_logical_column, dbf_int32_column, dbf_autoincrement_column,
    dbf_double_column, dbf_currency_column, dbf_memo_column, dbf_binary_column, dbf_ole_column,
    dbf_format_field_value, dbf_parse_field_value,
)
from dbf_schema import DBF_MAX_FIELDS, DBF_MAX_RECORD_SIZE, DBF_HEADER_SIZE, DBFSchema
from dbf_memo import (
    DBF_MEMO_BLOCK_SIZE, DBF_VERSION_DBASE3_MEMO, DBFMemoFile,
    dbf_memo_filename, dbf_memo_open, dbf_memo_create,
)
from dbf_stream import stream_insert_range, stream_remove_range


logger = logging.getLogger(__name__)

# Constants
DBF_FIELD_TERMINATOR = 0x0D
DBF_EOF = 0x1A
DBF_VERSION_FOXPRO = 0x02
DBF_VERSION_DBASE3 = 0x03
DBF_VERSION_DBASE4 = 0x04
DBF_VERSION_DBASE5 = 0x05
DBF_VERSION_VISUAL_FOXPRO = 0x30
DBF_VERSION_DBASE4_MEMO = 0x8B
DBF_VERSION_FOXPRO_MEMO = 0xF5

VERSION_DESCRIPTIONS = {
    0x02: "FoxPro",
    0x03: "dBase III without memo file",
    0x04: "dBase IV without memo file",
    0x05: "dBase V without memo file",
    0x07: "Visual Objects 1.x",
    0x30: "Visual FoxPro",
    0x31: "Visual FoxPro with AutoIncrement field",
    0x43: "dBASE IV SQL table files, no memo",
    0x63: "dBASE IV SQL system files, no memo",
    0x7B: "dBase IV with memo file",
    0x83: "dBase III with memo file",
    0x87: "Visual Objects 1.x with memo file",
    0x8B: "dBase IV with memo file",
    0x8E: "dBase IV with SQL table",
    0xCB: "dBASE IV SQL table files, with memo",
    0xF5: "FoxPro with memo file",
    0xFB: "FoxPro without memo file",
}


class DBFVersion(int):
    """Version byte of a table; flag bits are exposed as properties."""

    @property
    def dialect(self) -> int:
        return self & 0x07

    @property
    def has_dos_memo(self) -> bool:
        return bool(self & 0x08)

    @property
    def sql_table(self) -> int:
        return (self & 0x70) >> 4

    @property
    def has_dbt_memo(self) -> bool:
        return bool(self & 0x80)

    @property
    def is_foxpro(self) -> bool:
        return int(self) in (0x30, 0x31, 0xF5, 0xFB)

    @property
    def description(self) -> str:
        return VERSION_DESCRIPTIONS.get(int(self), "Unknown")

    def __repr__(self) -> str:
        return f"DBFVersion(0x{int(self):02X})"


class DBFRecordStatus(IntEnum):
    """First byte of every record."""
    VALID = 0x20
    DELETED = 0x2A


def _record_status(flag: int) -> DBFRecordStatus:
    return DBFRecordStatus.DELETED if flag == DBFRecordStatus.DELETED else DBFRecordStatus.VALID


# Data structures
@dataclass
class DBFHeader:
    """Represents the header of a DBF file."""
    version: DBFVersion = DBFVersion(DBF_VERSION_DBASE3)  # dBase version, e.g., 0x03 for dBase III
    year: int = 0  # Last update year (since 1900)
    month: int = 1  # Last update month
    day: int = 1  # Last update day
    record_count: int = 0  # Number of records
    header_size: int = 0  # Header size in bytes
    record_size: int = 0  # Record size in bytes
    in_transaction: int = 0  # Incomplete transaction flag
    encrypted: int = 0  # Encryption flag
    table_flags: int = 0  # Production MDX flag
    language_driver: int = DBF_LANG_OEM  # Language driver id

    def __post_init__(self):
        self.version = DBFVersion(self.version)

    @property
    def last_update(self) -> Tuple[int, int, int]:
        """Last update as (year since 1900, month, day)."""
        return (self.year, self.month, self.day)

    @property
    def has_mdx(self) -> bool:
        return bool(self.table_flags & 0x01)


@dataclass
class DBFRecord:
    """
    One record read from (or to be written to) a table.

    A detached copy: changing it does not touch the file until it is
    passed to dbf_file_set_record / dbf_file_append_record.
    """
    values: List[Any]
    status: DBFRecordStatus = DBFRecordStatus.VALID
    field_names: Optional[List[str]] = field(default=None, compare=False, repr=False)

    @property
    def is_deleted(self) -> bool:
        return self.status == DBFRecordStatus.DELETED

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            names = [name.upper() for name in (self.field_names or [])]
            try:
                key = names.index(key.upper())
            except ValueError:
                raise DBFFieldMissingError(key) from None
        return self.values[key]


class DBFFile:
    """An open DBF table: stream, header, schema and optional memo file."""

    def __init__(self, stream: BinaryIO, header: DBFHeader, schema: DBFSchema,
                 memo: Optional[DBFMemoFile] = None, filename: Optional[str] = None,
                 owns_stream: bool = True):
        self.file = stream
        self.header = header
        self.schema = schema
        self.memo = memo
        self.filename = filename
        self.owns_stream = owns_stream
        self.is_open = True
        self._update_context()

    def _update_context(self) -> None:
        language = self.header.language_driver
        self.context = FieldContext(encoding=dbf_language_get_encoding(language),
                                    decimal_separator=dbf_language_get_decimal_separator(language),
                                    memo=self.memo)

    @property
    def version(self) -> DBFVersion:
        return self.header.version

    @property
    def record_count(self) -> int:
        return self.header.record_count

    @property
    def encoding(self) -> str:
        return self.context.encoding

    @property
    def decimal_separator(self) -> str:
        return self.context.decimal_separator

    def __len__(self) -> int:
        return self.header.record_count

    def __iter__(self) -> Iterator[DBFRecord]:
        return dbf_file_iter_records(self)

    def __getitem__(self, index: int) -> DBFRecord:
        return dbf_file_get_record(self, index)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        dbf_file_close(self)

    def __repr__(self) -> str:
        return (f"DBFFile({self.filename or '<stream>'!r}, version={self.version!r}, "
                f"fields={len(self.schema)}, records={self.header.record_count})")


# Helper functions
def _today() -> datetime.date:
    return datetime.datetime.now(datetime.timezone.utc).date()


def pack_dbf_header(header: DBFHeader) -> bytes:
    """Build the 32-byte file prologue."""
    buf = bytearray(DBF_HEADER_SIZE)
    buf[0] = header.version
    buf[1] = header.year
    buf[2] = header.month
    buf[3] = header.day
    buf[4:8] = struct.pack("<L", header.record_count)
    buf[8:10] = struct.pack("<H", header.header_size)
    buf[10:12] = struct.pack("<H", header.record_size)
    buf[14] = header.in_transaction
    buf[15] = header.encrypted
    buf[28] = header.table_flags
    buf[29] = header.language_driver
    return bytes(buf)


def unpack_dbf_header(buf: bytes) -> DBFHeader:
    """Parse the 32-byte file prologue."""
    if len(buf) < DBF_HEADER_SIZE:
        raise DBFFormatError("Not a dBase file: header is truncated")
    return DBFHeader(
        version=DBFVersion(buf[0]),
        year=buf[1],
        month=buf[2],
        day=buf[3],
        record_count=struct.unpack_from("<L", buf, 4)[0],
        header_size=struct.unpack_from("<H", buf, 8)[0],
        record_size=struct.unpack_from("<H", buf, 10)[0],
        in_transaction=buf[14],
        encrypted=buf[15],
        table_flags=buf[28],
        language_driver=buf[29],
    )


def read_dbf_header(file: BinaryIO) -> Tuple[DBFHeader, List[DBFColumn]]:
    """
    Read a DBF header and its field descriptors.

    Descriptors are read until the 0x0D terminator, which must lie inside
    the header length stored in the prologue.

    Args:
        file: Seekable binary stream positioned anywhere

    Returns:
        Tuple of (header, columns)
    """
    file.seek(0)
    header = unpack_dbf_header(file.read(DBF_HEADER_SIZE))
    max_fields = max(0, (header.header_size - DBF_HEADER_SIZE) // DBF_FIELD_DESCRIPTOR_SIZE)

    # Read field descriptors until 0x0D (field descriptor terminator)
    columns = []
    while True:
        peek_byte = file.read(1)
        if not peek_byte:
            raise DBFFormatError("Not a dBase file: missing field descriptor terminator")
        if peek_byte[0] == DBF_FIELD_TERMINATOR:
            break
        if len(columns) >= max_fields:
            raise DBFFormatError("Not a dBase file: missing field descriptor terminator")
        rest = file.read(DBF_FIELD_DESCRIPTOR_SIZE - 1)
        if len(rest) < DBF_FIELD_DESCRIPTOR_SIZE - 1:
            raise DBFFormatError("Not a dBase file: field descriptor is truncated")
        columns.append(unpack_field_descriptor(peek_byte + rest))

    return header, columns


def write_dbf_header(file: BinaryIO, header: DBFHeader, schema: DBFSchema) -> None:
    """
    Write the header of an empty table.

    Prologue, field descriptors, the 0x0D terminator and the 0x1A end of
    file marker are written in one pass from offset 0.
    """
    buf = bytearray(pack_dbf_header(header))
    for column in schema.columns:
        buf += pack_field_descriptor(column)
    buf.append(DBF_FIELD_TERMINATOR)
    buf.append(DBF_EOF)
    file.seek(0)
    file.write(buf)


def _choose_version(schema: DBFSchema, version: Optional[int]) -> DBFVersion:
    if version is None:
        version = DBF_VERSION_DBASE3_MEMO if schema.has_memo_fields() else DBF_VERSION_DBASE3
    version = DBFVersion(version)
    if version.has_dbt_memo and version != DBF_VERSION_DBASE3_MEMO:
        raise DBFUnsupportedFormatError(f"Memo files for {version.description} are not supported")
    return version


def _check_schema_matches(header: DBFHeader, schema: DBFSchema) -> None:
    if header.header_size != schema.header_length:
        raise DBFConsistencyError(
            f"Invalid header length: stored {header.header_size}, expected {schema.header_length}")
    if header.record_size != schema.record_length:
        raise DBFConsistencyError(
            f"Invalid record length: stored {header.record_size}, expected {schema.record_length}")


def _load(stream: BinaryIO, memo_stream: Optional[BinaryIO], filename: Optional[str],
          owns_stream: bool) -> DBFFile:
    header, columns = read_dbf_header(stream)
    schema = DBFSchema(columns)
    _check_schema_matches(header, schema)
    dbf_language_get_encoding(header.language_driver)

    memo = None
    if header.version.has_dbt_memo:
        if memo_stream is not None:
            try:
                memo = dbf_memo_open(memo_stream, header.version, owns_stream=owns_stream)
            except DBFUnsupportedFormatError:
                raise
            except DBFFormatError as e:
                logger.warning("%s: memo file unreadable (%s); memo fields read as None",
                               filename or "<stream>", e)
                if owns_stream:
                    memo_stream.close()
        else:
            logger.warning("%s: memo file not found; memo fields read as None",
                           filename or "<stream>")
    dbf = DBFFile(stream, header, schema, memo, filename, owns_stream)
    logger.debug("Opened %r", dbf)
    return dbf


def _initialize(stream: BinaryIO, columns: Union[DBFSchema, Iterable[DBFColumn]],
                version: Optional[int], language_driver: int) -> Tuple[DBFHeader, DBFSchema]:
    schema = columns if isinstance(columns, DBFSchema) else DBFSchema(columns)
    version = _choose_version(schema, version)
    dbf_language_get_encoding(language_driver)
    today = _today()
    header = DBFHeader(
        version=version,
        year=today.year - 1900,
        month=today.month,
        day=today.day,
        header_size=schema.header_length,
        record_size=schema.record_length,
        language_driver=language_driver,
    )
    stream.seek(0)
    stream.truncate()
    write_dbf_header(stream, header, schema)
    stream.flush()
    return header, schema


def _dbf_filename(filename: str) -> str:
    # Ensure the filename has an extension
    if not os.path.splitext(filename)[1]:
        filename = filename + '.DBF'
    return filename


# Main DBF functions
def dbf_file_open(filename: str) -> DBFFile:
    """
    Open an existing DBF file.

    The memo file is opened too when the version byte says there is one
    and it exists next to the table.

    Args:
        filename: The path to the DBF file (with or without extension)

    Returns:
        A DBFFile object representing the opened file
    """
    filename = _dbf_filename(filename)
    stream = open(filename, "rb+")
    memo_stream = None
    try:
        first = stream.read(1)
        if first and DBFVersion(first[0]).has_dbt_memo:
            memo_filename = dbf_memo_filename(filename)
            if os.path.exists(memo_filename):
                memo_stream = open(memo_filename, "rb+")
        return _load(stream, memo_stream, filename, owns_stream=True)
    except Exception:
        if memo_stream is not None:
            memo_stream.close()
        stream.close()
        raise


def dbf_file_create(filename: str, columns: Union[DBFSchema, Iterable[DBFColumn]],
                    version: Optional[int] = None,
                    language_driver: int = DBF_LANG_OEM) -> DBFFile:
    """
    Create a new DBF file, replacing any existing one.

    Args:
        filename: The path to the DBF file (with or without extension)
        columns: Field definitions
        version: Version byte; 0x83 when a Memo/Binary/Ole field exists, else 0x03
        language_driver: Language driver id written at byte 29

    Returns:
        A DBFFile object representing the created file (opened in read-write mode)
    """
    filename = _dbf_filename(filename)
    schema = columns if isinstance(columns, DBFSchema) else DBFSchema(columns)
    version = _choose_version(schema, version)
    dbf_language_get_encoding(language_driver)

    stream = open(filename, "wb+")
    memo_stream = None
    try:
        header, schema = _initialize(stream, schema, version, language_driver)
        memo = None
        if header.version.has_dbt_memo:
            memo_stream = open(dbf_memo_filename(filename), "wb+")
            memo = dbf_memo_create(memo_stream, header.version)
        dbf = DBFFile(stream, header, schema, memo, filename, owns_stream=True)
    except Exception:
        if memo_stream is not None:
            memo_stream.close()
        stream.close()
        raise
    logger.debug("Created %r", dbf)
    return dbf


def dbf_stream_open(stream: BinaryIO, memo_stream: Optional[BinaryIO] = None) -> DBFFile:
    """
    Open a table held in a caller-owned stream (e.g. io.BytesIO).

    Streams passed in are left open by dbf_file_close.
    """
    return _load(stream, memo_stream, None, owns_stream=False)


def dbf_stream_create(stream: BinaryIO, columns: Union[DBFSchema, Iterable[DBFColumn]],
                      version: Optional[int] = None, language_driver: int = DBF_LANG_OEM,
                      memo_stream: Optional[BinaryIO] = None) -> DBFFile:
    """Create a table in a caller-owned stream; see dbf_file_create."""
    header, schema = _initialize(stream, columns, version, language_driver)
    memo = None
    if header.version.has_dbt_memo:
        if memo_stream is not None:
            memo = dbf_memo_create(memo_stream, header.version, owns_stream=False)
        else:
            logger.warning("<stream>: no memo stream given; memo fields cannot be written")
    return DBFFile(stream, header, schema, memo, None, owns_stream=False)


def dbf_file_close(dbf: DBFFile) -> None:
    """Close a DBF file and its memo file."""
    if dbf is None or not dbf.is_open:
        return
    if dbf.memo is not None:
        dbf.memo.close()
    dbf.file.flush()
    if dbf.owns_stream:
        dbf.file.close()
    dbf.is_open = False
    logger.debug("Closed %s", dbf.filename or "<stream>")


def _check_open(dbf: DBFFile) -> None:
    if not dbf.is_open:
        raise DBFError("I/O operation on closed DBF file")


def _check_index(dbf: DBFFile, index: int) -> None:
    _check_open(dbf)
    if isinstance(index, bool) or not isinstance(index, int):
        raise DBFTypeMismatchError(f"Record index must be an int, got {type(index).__name__}")
    if not 0 <= index < dbf.header.record_count:
        raise DBFRangeError(f"Record index {index} out of range (0..{dbf.header.record_count - 1})")


def _check_range(dbf: DBFFile, start: int, count: int) -> None:
    _check_open(dbf)
    if start < 0 or count < 0 or start + count > dbf.header.record_count:
        raise DBFRangeError(
            f"Record range {start}..{start + count} outside 0..{dbf.header.record_count}")


def _record_offset(dbf: DBFFile, index: int) -> int:
    return dbf.header.header_size + dbf.header.record_size * index


def _read_raw_record(dbf: DBFFile, index: int) -> bytes:
    dbf.file.seek(_record_offset(dbf, index))
    raw = dbf.file.read(dbf.header.record_size)
    if len(raw) < dbf.header.record_size:
        raise DBFFormatError(f"Record {index} is truncated")
    return raw


def _split_record(values) -> Tuple[Optional[Sequence[Any]], Optional[DBFRecordStatus]]:
    if isinstance(values, DBFRecord):
        return values.values, values.status
    return values, None


def _touch(dbf: DBFFile) -> None:
    """Update the last-update date when the UTC day changed, then flush."""
    today = _today()
    stamp = (today.year - 1900, today.month, today.day)
    if dbf.header.last_update != stamp:
        dbf_file_set_date(dbf, *stamp)
    dbf.file.flush()


def _write_record_count(dbf: DBFFile) -> None:
    dbf.file.seek(4)
    dbf.file.write(struct.pack("<L", dbf.header.record_count))


def dbf_file_get_record(dbf: DBFFile, index: int) -> DBFRecord:
    """
    Read a record.

    Args:
        dbf: The DBF file object
        index: 0-based record index

    Returns:
        A DBFRecord with the decoded values and the status byte
    """
    _check_index(dbf, index)
    raw = _read_raw_record(dbf, index)
    return DBFRecord(dbf.schema.read_record(raw, dbf.context), _record_status(raw[0]),
                     dbf.schema.field_names)


def dbf_file_set_record(dbf: DBFFile, index: int, values: Union[DBFRecord, Sequence[Any]]) -> None:
    """
    Overwrite a record.

    A DBFRecord also sets the status byte; a plain sequence of values
    keeps the status the record already has.
    """
    _check_index(dbf, index)
    values, status = _split_record(values)
    if values is None:
        raise DBFTypeMismatchError("No values given")
    if status is None:
        dbf.file.seek(_record_offset(dbf, index))
        status = _record_status(dbf.file.read(1)[0])
    buf = dbf.schema.write_record(values, dbf.context, status)
    dbf.file.seek(_record_offset(dbf, index))
    dbf.file.write(buf)
    _touch(dbf)


def dbf_file_get_field(dbf: DBFFile, index: int, field_key: Union[int, str]) -> Any:
    """
    Read one field of a record without decoding the others.

    Args:
        dbf: The DBF file object
        index: 0-based record index
        field_key: Field index or (case-insensitive) name
    """
    _check_index(dbf, index)
    column = dbf.schema[field_key]
    dbf.file.seek(_record_offset(dbf, index) + column.offset)
    raw = dbf.file.read(column.length)
    return dbf.schema.codec(field_key).decode(raw, dbf.context)


def dbf_file_set_field(dbf: DBFFile, index: int, field_key: Union[int, str], value: Any) -> None:
    """Write one field of a record."""
    _check_index(dbf, index)
    offset = dbf.schema.offset_of(field_key)
    data = dbf.schema.write_field(field_key, value, dbf.context)
    dbf.file.seek(_record_offset(dbf, index) + offset)
    dbf.file.write(data)
    _touch(dbf)


def dbf_file_append_records(dbf: DBFFile, records: Iterable[Union[DBFRecord, Sequence[Any], None]]) -> int:
    """
    Append records after the last one.

    Every record is validated before anything is written. None appends
    a blank record.

    Returns:
        Number of records appended
    """
    _check_open(dbf)
    rows = [_split_record(r) if r is not None else (None, None) for r in records]
    for values, _ in rows:
        if values is not None:
            dbf.schema.check_values(values, dbf.context)

    buf = bytearray()
    for values, status in rows:
        buf += dbf.schema.write_record(values, dbf.context, status or DBFRecordStatus.VALID)
    buf.append(DBF_EOF)

    dbf.file.seek(_record_offset(dbf, dbf.header.record_count))
    dbf.file.write(buf)
    dbf.header.record_count += len(rows)
    _write_record_count(dbf)
    _touch(dbf)
    return len(rows)


def dbf_file_append_record(dbf: DBFFile, values: Union[DBFRecord, Sequence[Any], None] = None) -> int:
    """
    Append a record after the last one.

    Args:
        dbf: The DBF file object
        values: One value per field, a DBFRecord, or None for a blank record

    Returns:
        Index of the new record
    """
    dbf_file_append_records(dbf, [values])
    return dbf.header.record_count - 1


def dbf_file_insert_record(dbf: DBFFile, index: int,
                           values: Union[DBFRecord, Sequence[Any], None] = None) -> None:
    """
    Insert a record before the record at index; index == record count appends.

    Following records (and the end of file marker) shift right by one
    record length.
    """
    _check_open(dbf)
    if index == dbf.header.record_count:
        dbf_file_append_record(dbf, values)
        return
    _check_index(dbf, index)
    values, status = _split_record(values)
    buf = dbf.schema.write_record(values, dbf.context, status or DBFRecordStatus.VALID)
    stream_insert_range(dbf.file, _record_offset(dbf, index), buf)
    dbf.header.record_count += 1
    _write_record_count(dbf)
    _touch(dbf)
    logger.debug("Inserted record at %d", index)


def _write_status_range(dbf: DBFFile, start: int, count: int, status: DBFRecordStatus) -> None:
    _check_range(dbf, start, count)
    flag = bytes([status])
    for i in range(start, start + count):
        dbf.file.seek(_record_offset(dbf, i))
        dbf.file.write(flag)
    _touch(dbf)


def dbf_file_delete_range(dbf: DBFFile, start: int, count: int) -> None:
    """Mark count records starting at start as deleted."""
    _write_status_range(dbf, start, count, DBFRecordStatus.DELETED)


def dbf_file_restore_range(dbf: DBFFile, start: int, count: int) -> None:
    """Mark count records starting at start as valid again."""
    _write_status_range(dbf, start, count, DBFRecordStatus.VALID)


def dbf_file_delete_record(dbf: DBFFile, index: int) -> None:
    dbf_file_delete_range(dbf, index, 1)


def dbf_file_restore_record(dbf: DBFFile, index: int) -> None:
    dbf_file_restore_range(dbf, index, 1)


def dbf_file_get_record_status(dbf: DBFFile, index: int) -> DBFRecordStatus:
    """Read the status byte of a record."""
    _check_index(dbf, index)
    dbf.file.seek(_record_offset(dbf, index))
    return _record_status(dbf.file.read(1)[0])


def dbf_file_set_record_status(dbf: DBFFile, index: int, status: DBFRecordStatus) -> None:
    _write_status_range(dbf, index, 1, DBFRecordStatus(status))


def dbf_file_remove_range(dbf: DBFFile, start: int, count: int) -> None:
    """
    Physically remove count records starting at start.

    Following records shift left; the file shrinks.
    """
    _check_range(dbf, start, count)
    if count == 0:
        return
    stream_remove_range(dbf.file, _record_offset(dbf, start), dbf.header.record_size * count)
    dbf.header.record_count -= count
    _write_record_count(dbf)
    _touch(dbf)
    logger.debug("Removed records %d..%d", start, start + count - 1)


def dbf_file_remove_record(dbf: DBFFile, index: int) -> None:
    _check_index(dbf, index)
    dbf_file_remove_range(dbf, index, 1)


def dbf_file_remove_deleted(dbf: DBFFile) -> int:
    """
    Physically remove every record marked as deleted.

    Scans from the last record backward and removes each run of deleted
    records in one shift, so indices below the scan position stay valid.

    Returns:
        Number of records removed
    """
    _check_open(dbf)
    removed = 0
    run_end = None  # one past the last record of the current run
    for i in range(dbf.header.record_count - 1, -1, -1):
        dbf.file.seek(_record_offset(dbf, i))
        if dbf.file.read(1)[0] == DBFRecordStatus.DELETED:
            if run_end is None:
                run_end = i + 1
        elif run_end is not None:
            dbf_file_remove_range(dbf, i + 1, run_end - i - 1)
            removed += run_end - i - 1
            run_end = None
    if run_end is not None:
        dbf_file_remove_range(dbf, 0, run_end)
        removed += run_end
    logger.debug("Compacted %s: %d records removed", dbf.filename or "<stream>", removed)
    return removed


def dbf_file_clear(dbf: DBFFile) -> None:
    """Remove every record. The memo file is left as is."""
    _check_open(dbf)
    dbf.file.truncate(dbf.header.header_size)
    dbf.file.seek(dbf.header.header_size)
    dbf.file.write(bytes([DBF_EOF]))
    dbf.header.record_count = 0
    _write_record_count(dbf)
    _touch(dbf)


def dbf_file_iter_records(dbf: DBFFile) -> Iterator[DBFRecord]:
    """Yield every record, deleted ones included."""
    _check_open(dbf)
    for i in range(dbf.header.record_count):
        yield dbf_file_get_record(dbf, i)


def dbf_file_index_of(dbf: DBFFile, record: Union[DBFRecord, Sequence[Any]]) -> int:
    """
    Index of the first record equal to record, or -1.

    A DBFRecord must also match the status; a plain sequence only the values.
    """
    for i, elem in enumerate(dbf_file_iter_records(dbf)):
        if isinstance(record, DBFRecord):
            if elem == record:
                return i
        elif elem.values == list(record):
            return i
    return -1


def dbf_file_contains(dbf: DBFFile, record: Union[DBFRecord, Sequence[Any]]) -> bool:
    return dbf_file_index_of(dbf, record) >= 0


def dbf_file_clone(dbf: DBFFile, filename: str) -> DBFFile:
    """
    Copy the table (and its memo file) to filename and open the copy.

    Args:
        dbf: The DBF file object
        filename: Destination path (with or without extension)

    Returns:
        The opened copy
    """
    _check_open(dbf)
    filename = _dbf_filename(filename)
    dbf.file.flush()
    dbf.file.seek(0)
    with open(filename, "wb") as f:
        shutil.copyfileobj(dbf.file, f)
    if dbf.memo is not None:
        dbf.memo.flush()
        dbf.memo.stream.seek(0)
        with open(dbf_memo_filename(filename), "wb") as f:
            shutil.copyfileobj(dbf.memo.stream, f)
    return dbf_file_open(filename)


def dbf_file_get_date(dbf: DBFFile) -> Tuple[int, int, int]:
    """
    Get the last update date from a DBF file.

    Args:
        dbf: The DBF file object

    Returns:
        A tuple of (year, month, day) where year is since 1900
    """
    return dbf.header.last_update


def dbf_file_set_date(dbf: DBFFile, year: int, month: int, day: int) -> None:
    """
    Set the last update date in a DBF file.

    Args:
        dbf: The DBF file object
        year: Year since 1900 (e.g., 126 for 2026)
        month: Month (1-12)
        day: Day (1-31)
    """
    _check_open(dbf)
    dbf.header.year = year
    dbf.header.month = month
    dbf.header.day = day

    old_pos = dbf.file.tell()
    dbf.file.seek(1)  # Date starts at byte 1
    dbf.file.write(bytes([year, month, day]))
    dbf.file.seek(old_pos)
    dbf.file.flush()


def dbf_file_get_language_driver(dbf: DBFFile) -> int:
    """
    Get the language driver ID from a DBF file.

    Returns:
        The language driver ID (0 for dBase III, 1 for US, etc.)
    """
    return dbf.header.language_driver


def dbf_file_set_language_driver(dbf: DBFFile, language_driver: int) -> None:
    """
    Set the language driver ID in a DBF file.

    Text and numbers written afterwards use the new encoding and decimal
    separator; existing records are not converted.

    Args:
        dbf: The DBF file object
        language_driver: The language driver ID (e.g., 1 for US, 2 for Western Europe)
    """
    _check_open(dbf)
    dbf_language_get_encoding(language_driver)
    dbf.header.language_driver = language_driver
    dbf._update_context()

    old_pos = dbf.file.tell()
    dbf.file.seek(29)  # Language driver is at byte 29
    dbf.file.write(bytes([language_driver]))
    dbf.file.seek(old_pos)
    dbf.file.flush()


__all__ = [
    'DBF_FIELD_TERMINATOR', 'DBF_EOF', 'VERSION_DESCRIPTIONS',
    'DBF_VERSION_FOXPRO', 'DBF_VERSION_DBASE3', 'DBF_VERSION_DBASE4', 'DBF_VERSION_DBASE5',
    'DBF_VERSION_VISUAL_FOXPRO', 'DBF_VERSION_DBASE3_MEMO', 'DBF_VERSION_DBASE4_MEMO',
    'DBF_VERSION_FOXPRO_MEMO',
    'DBFVersion', 'DBFRecordStatus', 'DBFHeader', 'DBFRecord', 'DBFFile',
    'pack_dbf_header', 'unpack_dbf_header', 'read_dbf_header', 'write_dbf_header',
    'dbf_file_open', 'dbf_file_create', 'dbf_stream_open', 'dbf_stream_create', 'dbf_file_close',
    'dbf_file_get_record', 'dbf_file_set_record', 'dbf_file_get_field', 'dbf_file_set_field',
    'dbf_file_append_records', 'dbf_file_append_record', 'dbf_file_insert_record',
    'dbf_file_delete_range', 'dbf_file_restore_range', 'dbf_file_delete_record', 'dbf_file_restore_record',
    'dbf_file_get_record_status', 'dbf_file_set_record_status',
    'dbf_file_remove_range', 'dbf_file_remove_record', 'dbf_file_remove_deleted', 'dbf_file_clear',
    'dbf_file_iter_records', 'dbf_file_index_of', 'dbf_file_contains', 'dbf_file_clone',
    'dbf_file_get_date', 'dbf_file_set_date',
    'dbf_file_get_language_driver', 'dbf_file_set_language_driver',
    # Re-exported so callers can build and inspect tables from this module alone
    'DBF_LANG_OEM', 'DBF_LANG_US', 'DBF_LANG_WESTERN_EUROPE', 'DBF_LANG_WINDOWS_ANSI', 'DBF_LANG_JAPAN',
    'DBF_MEMO_BLOCK_SIZE', 'DBF_MAX_FIELDS', 'DBF_MAX_RECORD_SIZE', 'DBF_HEADER_SIZE',
    'DBFColumn', 'DBFFieldType', 'FieldContext', 'DBFSchema', 'DBFMemoFile',
    'dbf_character_column', 'dbf_numeric_column', 'dbf_float_column', 'dbf_date_column',
    'dbf_timestamp_column', 'dbf_logical_column', 'dbf_int32_column', 'dbf_autoincrement_column',
    'dbf_double_column', 'dbf_currency_column', 'dbf_memo_column', 'dbf_binary_column', 'dbf_ole_column',
    'dbf_format_field_value', 'dbf_parse_field_value',
]
