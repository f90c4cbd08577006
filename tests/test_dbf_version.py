"""
Test file for DBF version byte handling.
This verifies the version chosen on create and the flags decoded from it.
"""

import io
import os
import shutil
import tempfile
import unittest
from dbf_errors import DBFUnsupportedFormatError
from dbf_module import (
    DBFVersion,
    dbf_file_create, dbf_file_close, dbf_file_open, dbf_stream_create, dbf_stream_open,
    dbf_character_column, dbf_numeric_column, dbf_logical_column,
    dbf_memo_column, dbf_binary_column, dbf_ole_column,
)


class TestDBFVersionFlags(unittest.TestCase):
    """Test cases for the flags packed into the version byte."""

    def test_dbase3(self):
        version = DBFVersion(0x03)
        self.assertEqual(version, 3)
        self.assertEqual(version.dialect, 3)
        self.assertFalse(version.has_dbt_memo)
        self.assertFalse(version.has_dos_memo)
        self.assertEqual(version.sql_table, 0)
        self.assertFalse(version.is_foxpro)
        self.assertEqual(version.description, "dBase III without memo file")

    def test_dbase3_memo(self):
        version = DBFVersion(0x83)
        self.assertTrue(version.has_dbt_memo)
        self.assertEqual(version.dialect, 3)
        self.assertEqual(version.description, "dBase III with memo file")

    def test_dbase4_memo(self):
        version = DBFVersion(0x8B)
        self.assertTrue(version.has_dbt_memo)
        self.assertTrue(version.has_dos_memo)
        self.assertEqual(version.dialect, 3)

    def test_sql_table(self):
        self.assertEqual(DBFVersion(0x43).sql_table, 4)
        self.assertEqual(DBFVersion(0x63).sql_table, 6)
        self.assertEqual(DBFVersion(0xCB).description, "dBASE IV SQL table files, with memo")

    def test_foxpro(self):
        for value in (0x30, 0x31, 0xF5, 0xFB):
            self.assertTrue(DBFVersion(value).is_foxpro, hex(value))
        self.assertFalse(DBFVersion(0x02).is_foxpro)
        self.assertEqual(DBFVersion(0x02).description, "FoxPro")

    def test_unknown_description(self):
        self.assertEqual(DBFVersion(0x99).description, "Unknown")
        self.assertEqual(repr(DBFVersion(0x99)), "DBFVersion(0x99)")


class TestDBFVersion(unittest.TestCase):
    """Test cases for the version byte written on create."""

    def setUp(self):
        """Set up test environment."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test files."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def read_version_byte(self, filename):
        with open(filename, 'rb') as f:
            return f.read(1)[0]

    def test_auto_version_without_memo(self):
        """No memo fields: 0x03 and no memo file."""
        filename = os.path.join(self.test_dir, "test_no_memo.DBF")
        dbf = dbf_file_create(filename, [dbf_numeric_column("ID", 5),
                                         dbf_character_column("NAME", 30),
                                         dbf_logical_column("ACTIVE")])
        self.assertEqual(dbf.header.version, 0x03)
        self.assertIsNone(dbf.memo)
        dbf_file_close(dbf)

        self.assertEqual(self.read_version_byte(filename), 0x03)
        self.assertFalse(os.path.exists(os.path.join(self.test_dir, "test_no_memo.DBT")))

    def test_auto_version_with_memo(self):
        """Any of Memo, Binary or Ole selects 0x83."""
        for i, column in enumerate((dbf_memo_column("NOTES"), dbf_binary_column("DATA"),
                                    dbf_ole_column("PIC"))):
            filename = os.path.join(self.test_dir, f"test_memo{i}.DBF")
            dbf = dbf_file_create(filename, [dbf_character_column("NAME", 10), column])
            self.assertEqual(dbf.header.version, 0x83)
            dbf_file_close(dbf)
            self.assertEqual(self.read_version_byte(filename), 0x83)
            self.assertTrue(os.path.exists(os.path.join(self.test_dir, f"test_memo{i}.DBT")))

    def test_multiple_memo_fields(self):
        filename = os.path.join(self.test_dir, "test_multi.DBF")
        with dbf_file_create(filename, [dbf_memo_column("NOTES1"), dbf_memo_column("NOTES2")]) as dbf:
            self.assertEqual(dbf.version, 0x83)

        with dbf_file_open(filename) as dbf:
            self.assertTrue(dbf.version.has_dbt_memo)
            self.assertIsNotNone(dbf.memo)

    def test_explicit_version_without_memo(self):
        """An explicit version byte is written as given."""
        stream = io.BytesIO()
        dbf_stream_create(stream, [dbf_character_column("NAME", 10)], version=0x04)
        self.assertEqual(stream.getvalue()[0], 0x04)
        self.assertEqual(dbf_stream_open(stream).version.description, "dBase IV without memo file")

    def test_unsupported_memo_dialect(self):
        """Only dBase III memo files can be created."""
        with self.assertRaises(DBFUnsupportedFormatError):
            dbf_stream_create(io.BytesIO(), [dbf_memo_column("NOTES")], version=0xF5)


if __name__ == "__main__":
    unittest.main()
