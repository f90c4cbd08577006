"""
Test file for field descriptors and per-type field codecs.
"""

import datetime
import io
import struct
import unittest
from decimal import Decimal
from dbf_errors import (
    DBFError, DBFFormatError, DBFInvalidSchemaError, DBFTypeMismatchError, DBFDataOverflowError
)
from dbf_field import (
    DBFColumn, DBFFieldType, FieldContext,
    dbf_field_type, dbf_column_coerce, dbf_create_codec,
    pack_field_descriptor, unpack_field_descriptor,
    dbf_character_column, dbf_numeric_column, dbf_date_column, dbf_timestamp_column,
    dbf_logical_column, dbf_int32_column, dbf_autoincrement_column, dbf_double_column,
    dbf_currency_column, dbf_memo_column, dbf_binary_column, dbf_ole_column,
    dbf_format_field_value, dbf_parse_field_value,
)
from dbf_memo import dbf_memo_create


US = FieldContext(encoding='cp437', decimal_separator='.')
EUROPE = FieldContext(encoding='cp852', decimal_separator=',')


def roundtrip(column, value, context=US):
    """Check, encode and decode a value; the encoded width must match the column."""
    codec = dbf_create_codec(column)
    codec.check(value, context)
    raw = codec.encode(value, context)
    assert len(raw) == column.length, f"{column.name}: {len(raw)} != {column.length}"
    return codec.decode(raw, context)


class TestFieldDescriptor(unittest.TestCase):
    """Test cases for the 32-byte field descriptor."""

    def test_descriptor_offsets(self):
        """Every descriptor attribute lands at its fixed offset."""
        column = DBFColumn(name="SALARY", field_type="N", length=10, decimals=2,
                           address=0x01020304, work_area_id=0x0506, set_fields=7, in_mdx=1)
        buf = pack_field_descriptor(column)

        self.assertEqual(len(buf), 32)
        self.assertEqual(buf[0:11], b"SALARY\x00\x00\x00\x00\x00")
        self.assertEqual(chr(buf[11]), 'N')
        self.assertEqual(struct.unpack("<L", buf[12:16])[0], 0x01020304)
        self.assertEqual(buf[16], 10)
        self.assertEqual(buf[17], 2)
        self.assertEqual(struct.unpack("<H", buf[20:22])[0], 0x0506)
        self.assertEqual(buf[23], 7)
        self.assertEqual(buf[31], 1)

    def test_descriptor_unpack(self):
        """Reserved bytes are kept when a descriptor is read back."""
        column = DBFColumn(name="NOTES", field_type="M", length=10, decimals=0,
                           address=99, work_area_id=3, set_fields=1, in_mdx=1)
        parsed = unpack_field_descriptor(pack_field_descriptor(column))
        self.assertEqual(parsed, column)
        self.assertEqual((parsed.address, parsed.work_area_id, parsed.set_fields, parsed.in_mdx),
                         (99, 3, 1, 1))

    def test_descriptor_eleven_byte_name(self):
        """Names fill all 11 bytes when no NUL terminator fits."""
        buf = bytearray(32)
        buf[0:11] = b"ABCDEFGHIJK"
        buf[11] = ord('C')
        buf[16] = 5
        self.assertEqual(unpack_field_descriptor(bytes(buf)).name, "ABCDEFGHIJK")

    def test_descriptor_wrong_size(self):
        with self.assertRaises(DBFFormatError):
            unpack_field_descriptor(b"\x00" * 31)


class TestFieldTypeCatalog(unittest.TestCase):
    """Test cases for type tags and length clamping."""

    def test_unknown_tag(self):
        """Unknown tags are rejected."""
        with self.assertRaises(DBFInvalidSchemaError):
            dbf_field_type('X')
        with self.assertRaises(DBFInvalidSchemaError):
            dbf_create_codec(DBFColumn(name="BAD", field_type="X", length=4))

    def test_known_tags(self):
        self.assertIs(dbf_field_type('@'), DBFFieldType.TIMESTAMP)
        self.assertIs(dbf_field_type(ord('N')), DBFFieldType.NUMERIC)
        self.assertIs(dbf_field_type('l'), DBFFieldType.LOGICAL)

    def test_clamping(self):
        """Length and decimals are forced to what each type stores."""
        cases = [
            (DBFColumn("L", "L", 5, 2), 1, 0),
            (DBFColumn("D", "D", 3), 8, 0),
            (DBFColumn("T", "@", 20), 8, 0),
            (DBFColumn("O", "O", 4, 3), 8, 0),
            (DBFColumn("Y", "Y", 4), 8, 0),
            (DBFColumn("I", "I", 10), 4, 0),
            (DBFColumn("P", "+", 1), 4, 0),
            (DBFColumn("M4", "M", 4), 4, 0),
            (DBFColumn("M7", "M", 7), 10, 0),
            (DBFColumn("B", "B", 0), 10, 0),
            (DBFColumn("N", "N", 5, 12), 5, 4),
            (DBFColumn("N0", "N", 0, 0), 1, 0),
            (DBFColumn("C", "C", 300, 2), 254, 0),
            (DBFColumn("C0", "C", 0), 1, 0),
        ]
        for column, length, decimals in cases:
            coerced = dbf_column_coerce(column)
            self.assertEqual((coerced.length, coerced.decimals), (length, decimals), column.name)

    def test_factories(self):
        """Column helpers build clamped columns and truncate names to 10 characters."""
        self.assertEqual(dbf_logical_column("ACTIVE").length, 1)
        self.assertEqual(dbf_numeric_column("PRICE", 8, 2),
                         DBFColumn("PRICE", "N", 8, 2))
        self.assertEqual(dbf_character_column("A_VERY_LONG_NAME", 20).name, "A_VERY_LON")
        self.assertEqual(dbf_ole_column("PIC").field_type, "G")


class TestFieldCodecs(unittest.TestCase):
    """Round trips and byte layout per field type."""

    def setUp(self):
        self.memo = dbf_memo_create(io.BytesIO(), 0x83)
        self.memo_context = FieldContext(encoding='cp437', decimal_separator='.', memo=self.memo)

    def test_character(self):
        column = dbf_character_column("NAME", 10)
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode("ALPHA", US), b"ALPHA     ")
        self.assertEqual(roundtrip(column, "ALPHA"), "ALPHA")
        self.assertIsNone(roundtrip(column, None))
        self.assertIsNone(roundtrip(column, ""))
        self.assertEqual(codec.decode(b"\x00 BETA\x00\x00\x00\x00\x00", US), "BETA")

    def test_character_truncation(self):
        """Values longer than the field are cut to the field width."""
        column = dbf_character_column("CODE", 3)
        self.assertEqual(roundtrip(column, "ABCDEF"), "ABC")

    def test_character_truncation_multibyte(self):
        """Double-byte characters are dropped whole when the field is full."""
        column = dbf_character_column("KANA", 3)
        japan = FieldContext(encoding='shift_jis', decimal_separator='.')
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode("あいう", japan), "あ ".encode('shift_jis'))
        self.assertEqual(roundtrip(column, "あいう", japan), "あ")
        self.assertEqual(roundtrip(column, "aあい", japan), "aあ")

    def test_character_codepage(self):
        column = dbf_character_column("CITY", 8)
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode("Łódź", EUROPE), "Łódź    ".encode('cp852'))
        self.assertEqual(roundtrip(column, "Łódź", EUROPE), "Łódź")

    def test_numeric_integer(self):
        column = dbf_numeric_column("COUNT", 5, 0)
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode(42, US), b"   42")
        self.assertEqual(roundtrip(column, -1234), -1234)
        self.assertIsInstance(roundtrip(column, 7), int)
        self.assertIsNone(roundtrip(column, None))

    def test_numeric_decimal(self):
        column = dbf_numeric_column("PRICE", 8, 2)
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode(3.14159, US), b"    3.14")
        self.assertEqual(codec.encode(2, US), b"    2.00")
        self.assertAlmostEqual(roundtrip(column, 1234.5), 1234.5)
        self.assertIsInstance(roundtrip(column, 1), float)

    def test_numeric_locale(self):
        """The decimal separator of the codepage is used both ways."""
        column = dbf_numeric_column("PRICE", 8, 2)
        codec = dbf_create_codec(column)
        raw = codec.encode(3.5, EUROPE)
        self.assertEqual(raw, b"    3,50")
        self.assertNotIn(b".", raw)
        self.assertEqual(codec.decode(raw, EUROPE), 3.5)
        self.assertEqual(codec.decode(b"   -0,25", EUROPE), -0.25)

    def test_numeric_overflow(self):
        """Integer digits that do not fit are an error; extra fraction digits are dropped."""
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("SMALL", 3, 0), 12345)
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("SMALL", 4, 1), 12345.5)
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("NAN", 8, 2), float('nan'))
        self.assertAlmostEqual(roundtrip(dbf_numeric_column("TIGHT", 5, 3), 12.345), 12.34)

    def test_numeric_huge_values(self):
        """Values beyond the float range overflow the field instead of the float conversion."""
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("BIG", 10, 0), 10 ** 400)
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("BIG", 10, 2), 10 ** 400)
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("BIG", 10, 2), Decimal("1e400"))
        with self.assertRaises(DBFDataOverflowError):
            roundtrip(dbf_numeric_column("NAN", 10, 2), Decimal("NaN"))
        self.assertEqual(roundtrip(dbf_numeric_column("EXACT", 20, 0), 10 ** 19), 10 ** 19)
        self.assertEqual(dbf_create_codec(dbf_numeric_column("DEC", 8, 2)).encode(Decimal("2.5"), US),
                         b"    2.50")

    def test_numeric_invalid_text(self):
        codec = dbf_create_codec(dbf_numeric_column("BAD", 5, 0))
        with self.assertRaises(DBFFormatError):
            codec.decode(b"  1x2", US)

    def test_numeric_type_mismatch(self):
        codec = dbf_create_codec(dbf_numeric_column("COUNT", 5, 0))
        with self.assertRaises(DBFTypeMismatchError):
            codec.check("12", US)
        with self.assertRaises(DBFTypeMismatchError):
            codec.check(True, US)

    def test_int32(self):
        for column in (dbf_int32_column("I"), dbf_autoincrement_column("ID")):
            codec = dbf_create_codec(column)
            self.assertEqual(codec.encode(1, US), b"\x01\x00\x00\x00")
            self.assertEqual(roundtrip(column, 2 ** 31 - 1), 2 ** 31 - 1)
            self.assertEqual(roundtrip(column, -2 ** 31), -2 ** 31)
            self.assertIsNone(roundtrip(column, None))
            with self.assertRaises(DBFDataOverflowError):
                codec.check(2 ** 31, US)

    def test_double(self):
        column = dbf_double_column("RATE")
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode(1.5, US), struct.pack("<d", 1.5))
        self.assertEqual(roundtrip(column, -0.1), -0.1)
        self.assertIsNone(roundtrip(column, None))

    def test_currency(self):
        column = dbf_currency_column("AMOUNT")
        self.assertEqual(roundtrip(column, Decimal("12.3456")), Decimal("12.3456"))
        self.assertEqual(roundtrip(column, 1.5), Decimal("1.5000"))
        self.assertIsNone(roundtrip(column, None))

    def test_currency_range(self):
        """Values outside the 64-bit Currency range are rejected before writing."""
        column = dbf_currency_column("AMOUNT")
        codec = dbf_create_codec(column)
        limit = Decimal("922337203685477.5807")
        self.assertEqual(roundtrip(column, Decimal("-922337203685477")), Decimal("-922337203685477.0000"))
        codec.check(limit, US)
        codec.check(-limit, US)
        for value in (Decimal("922337203685477.5808"), Decimal("1e25"), -1e30, float('inf'), float('nan')):
            with self.assertRaises(DBFDataOverflowError, msg=repr(value)):
                codec.check(value, US)

    def test_date(self):
        column = dbf_date_column("BORN")
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode(datetime.date(2024, 1, 15), US), b"20240115")
        self.assertEqual(roundtrip(column, datetime.date(1, 1, 1)), datetime.date(1, 1, 1))
        self.assertIsNone(codec.decode(b"        ", US))
        self.assertIsNone(codec.decode(b"00000000", US))
        self.assertIsNone(roundtrip(column, None))
        with self.assertRaises(DBFFormatError):
            codec.decode(b"2024AB01", US)
        with self.assertRaises(DBFFormatError):
            codec.decode(b"20241301", US)

    def test_timestamp(self):
        """Julian day number and milliseconds since midnight."""
        column = dbf_timestamp_column("STAMP")
        codec = dbf_create_codec(column)
        noon = datetime.datetime(2000, 1, 1, 12, 0, 0)
        self.assertEqual(codec.encode(noon, US), struct.pack("<ii", 2451545, 43200000))
        value = datetime.datetime(2024, 1, 15, 13, 45, 30, 123000)
        self.assertEqual(roundtrip(column, value), value)
        self.assertIsNone(codec.decode(b"\x00" * 8, US))
        self.assertIsNone(roundtrip(column, None))

    def test_datetime_tag(self):
        """'T' fields use the same layout as '@' fields."""
        column = dbf_column_coerce(DBFColumn("WHEN", "T", 8))
        value = datetime.datetime(1999, 12, 31, 23, 59, 59)
        self.assertEqual(roundtrip(column, value), value)

    def test_logical(self):
        column = dbf_logical_column("FLAG")
        codec = dbf_create_codec(column)
        self.assertEqual(codec.encode(True, US), b"T")
        self.assertEqual(codec.encode(False, US), b"F")
        self.assertEqual(codec.encode(None, US), b"?")
        for raw in (b"T", b"t", b"Y", b"y", b"1"):
            self.assertIs(codec.decode(raw, US), True, raw)
        for raw in (b"F", b"f", b"N", b"n", b"0"):
            self.assertIs(codec.decode(raw, US), False, raw)
        for raw in (b"?", b" "):
            self.assertIsNone(codec.decode(raw, US), raw)
        with self.assertRaises(DBFTypeMismatchError):
            codec.check("yes", US)

    def test_memo(self):
        """Memo text goes to the memo file; the field keeps the block number."""
        column = dbf_memo_column("NOTES")
        codec = dbf_create_codec(column)
        raw = codec.encode("Memo alpha", self.memo_context)
        self.assertEqual(raw, b"         1")
        self.assertEqual(codec.decode(raw, self.memo_context), "Memo alpha")
        self.assertEqual(roundtrip(column, "x" * 2000, self.memo_context), "x" * 2000)
        self.assertIsNone(roundtrip(column, None, self.memo_context))

    def test_memo_binary_index(self):
        """A 4-byte memo field stores the block number as a little-endian int."""
        column = dbf_memo_column("NOTES", 4)
        codec = dbf_create_codec(column)
        raw = codec.encode("short", self.memo_context)
        self.assertEqual(raw, struct.pack("<i", 1))
        self.assertEqual(codec.decode(raw, self.memo_context), "short")

    def test_memo_without_memo_file(self):
        """No memo file: values read as None and writes fail."""
        codec = dbf_create_codec(dbf_memo_column("NOTES"))
        self.assertIsNone(codec.decode(b"         1", US))
        with self.assertRaises(DBFError):
            codec.check("text", US)
        codec.check(None, US)

    def test_binary_and_ole(self):
        payload = bytes(range(256)) * 3
        for column in (dbf_binary_column("DATA"), dbf_ole_column("PIC")):
            self.assertEqual(roundtrip(column, payload, self.memo_context), payload)
            with self.assertRaises(DBFTypeMismatchError):
                dbf_create_codec(column).check("text", self.memo_context)

    def test_nullflags(self):
        column = dbf_column_coerce(DBFColumn("_NullFlags", "0", 2))
        self.assertEqual(roundtrip(column, b"\x01"), b"\x01\x00")
        self.assertEqual(roundtrip(column, None), b"\x00\x00")
        with self.assertRaises(DBFDataOverflowError):
            dbf_create_codec(column).check(b"\x00\x00\x00", US)


class TestFieldText(unittest.TestCase):
    """Test cases for formatting and parsing field values as text."""

    def test_format(self):
        self.assertEqual(dbf_format_field_value(dbf_numeric_column("N", 10, 2), 3.5), "3.50")
        self.assertEqual(dbf_format_field_value(dbf_numeric_column("N", 10, 0), 42), "42")
        self.assertEqual(dbf_format_field_value(dbf_date_column("D"), datetime.date(2024, 1, 5)),
                         "20240105")
        self.assertEqual(dbf_format_field_value(dbf_logical_column("L"), False), "F")
        self.assertEqual(dbf_format_field_value(dbf_character_column("C"), None), "")
        self.assertEqual(dbf_format_field_value(dbf_binary_column("B"), b"\x01\xab"), "01AB")
        self.assertEqual(dbf_format_field_value(dbf_timestamp_column("T"),
                                                datetime.datetime(2024, 1, 5, 6, 7, 8)),
                         "2024-01-05T06:07:08")

    def test_parse(self):
        self.assertEqual(dbf_parse_field_value(dbf_numeric_column("N", 10, 2), "3.50"), 3.5)
        self.assertEqual(dbf_parse_field_value(dbf_numeric_column("N", 10, 0), "42"), 42)
        self.assertEqual(dbf_parse_field_value(dbf_date_column("D"), "20240105"),
                         datetime.date(2024, 1, 5))
        self.assertIs(dbf_parse_field_value(dbf_logical_column("L"), "t"), True)
        self.assertIsNone(dbf_parse_field_value(dbf_character_column("C"), ""))
        self.assertEqual(dbf_parse_field_value(dbf_currency_column("Y"), "1.5"), Decimal("1.5000"))
        self.assertEqual(dbf_parse_field_value(dbf_binary_column("B"), "01AB"), b"\x01\xab")

    def test_parse_invalid(self):
        with self.assertRaises(DBFFormatError):
            dbf_parse_field_value(dbf_date_column("D"), "2024-01-05")
        with self.assertRaises(DBFFormatError):
            dbf_parse_field_value(dbf_numeric_column("N", 10, 2), "abc")
        with self.assertRaises(DBFFormatError):
            dbf_parse_field_value(dbf_logical_column("L"), "maybe")


if __name__ == "__main__":
    unittest.main()
