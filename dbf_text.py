"""
Pipe-delimited text export/import of DBF tables.

The text file format:
- Line 1: Field names separated by pipes (|)
- Line 2: Field specifications separated by pipes (|), e.g. C(30)|N(10,2)|D(8)
- Line 3+: One line per non-deleted record, values formatted with
  dbf_format_field_value

Values containing '|' or line breaks cannot be represented.
"""

import logging
import os
from typing import Optional, Tuple

from dbf_errors import DBFFormatError, DBFInvalidSchemaError
from dbf_field import (
    DBF_FIELD_NAME_MAX, DBFColumn, dbf_field_type, dbf_format_field_value, dbf_parse_field_value,
)
from dbf_module import (
    DBFRecordStatus, dbf_file_open, dbf_file_create, dbf_file_close,
    dbf_file_iter_records, dbf_file_append_records,
)


logger = logging.getLogger(__name__)

# Values of these types are kept verbatim on import
TEXT_TYPES = ('C', 'M')


def build_field_spec(field: DBFColumn) -> str:
    """
    Build a field specification string (e.g., 'C(30)' or 'N(10,2)').

    Args:
        field: The field column definition

    Returns:
        Field specification string
    """
    spec = f"{field.field_type}({field.length}"
    if field.decimals > 0:
        spec += f",{field.decimals}"
    spec += ")"
    return spec


def parse_field_spec(spec: str) -> Tuple[str, int, int]:
    """
    Parse a field specification string.

    Args:
        spec: Field specification string (e.g., 'C(30)' or 'N(10,2)')

    Returns:
        Tuple of (field_type, length, decimals)
    """
    spec = spec.strip()
    paren_start = spec.find('(')
    paren_end = spec.find(')')
    if paren_start < 1 or paren_end <= paren_start + 1:
        raise DBFInvalidSchemaError(f"Invalid field specification {spec!r}")

    field_type = dbf_field_type(spec[:paren_start].strip()).value

    # Check for comma (decimals)
    content = spec[paren_start + 1:paren_end]
    parts = content.split(',')
    try:
        length = int(parts[0].strip())
        decimals = int(parts[1].strip()) if len(parts) > 1 else 0
    except ValueError:
        raise DBFInvalidSchemaError(f"Invalid field specification {spec!r}") from None

    if len(parts) > 2 or length <= 0 or length > 255 or decimals < 0:
        raise DBFInvalidSchemaError(f"Invalid field specification {spec!r}")

    return (field_type, length, decimals)


def _text_filename(dbf_filename: str) -> str:
    base, ext = os.path.splitext(dbf_filename)
    return base + ('.txt' if ext[1:].islower() else '.TXT')


def export_dbf_to_text(dbf_filename: str, txt_filename: Optional[str] = None) -> int:
    """
    Export a DBF file to a pipe-delimited text file.

    Args:
        dbf_filename: Path to the DBF file
        txt_filename: Path of the text file; defaults to the DBF path with a .TXT extension

    Returns:
        Number of records written
    """
    if txt_filename is None:
        txt_filename = _text_filename(dbf_filename)

    count = 0
    with dbf_file_open(dbf_filename) as dbf:
        columns = dbf.schema.columns
        with open(txt_filename, 'w', encoding='utf-8') as f:
            f.write('|'.join(column.name for column in columns) + '\n')
            f.write('|'.join(build_field_spec(column) for column in columns) + '\n')

            # Write data rows (skip deleted rows)
            for record in dbf_file_iter_records(dbf):
                if record.status == DBFRecordStatus.DELETED:
                    continue
                row_values = [dbf_format_field_value(column, value)
                              for column, value in zip(columns, record.values)]
                f.write('|'.join(row_values) + '\n')
                count += 1

    logger.debug("Exported %d records from %s to %s", count, dbf_filename, txt_filename)
    return count


def import_dbf_from_text(txt_filename: str, dbf_filename: str) -> int:
    """
    Create a DBF file from a pipe-delimited text file.

    An existing DBF file (and its memo file) is replaced.

    Args:
        txt_filename: Path to the text file
        dbf_filename: Path of the DBF file to create

    Returns:
        Number of records imported
    """
    with open(txt_filename, 'r', encoding='utf-8') as f:
        lines = f.read().splitlines()

    if len(lines) < 2:
        raise DBFFormatError("Text file must have at least 2 lines (field names and specs)")

    field_names = [name.strip() for name in lines[0].split('|')]
    field_specs = [spec.strip() for spec in lines[1].split('|')]
    if len(field_names) != len(field_specs):
        raise DBFFormatError("Number of field names must match number of field specs")

    columns = []
    for name, spec in zip(field_names, field_specs):
        field_type, length, decimals = parse_field_spec(spec)
        columns.append(DBFColumn(name=name[:DBF_FIELD_NAME_MAX], field_type=field_type,
                                 length=length, decimals=decimals))

    dbf = dbf_file_create(dbf_filename, columns)
    try:
        columns = dbf.schema.columns
        rows = []
        for line_no, line in enumerate(lines[2:], start=3):
            if not line.strip():
                continue
            texts = line.split('|')
            if len(texts) != len(columns):
                raise DBFFormatError(
                    f"Line {line_no}: expected {len(columns)} values, got {len(texts)}")
            rows.append([dbf_parse_field_value(column, text if column.field_type in TEXT_TYPES else text.strip())
                         for column, text in zip(columns, texts)])
        count = dbf_file_append_records(dbf, rows) if rows else 0
    finally:
        dbf_file_close(dbf)

    logger.debug("Imported %d records from %s to %s", count, txt_filename, dbf_filename)
    return count


__all__ = [
    'build_field_spec', 'parse_field_spec', 'export_dbf_to_text', 'import_dbf_from_text',
]
