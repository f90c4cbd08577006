"""
dBase memo (.DBT) files.

Memo, Binary and Ole fields store a block number; the value itself lives
in the companion memo file. The file starts with a header block:

    offset 0  next free block (4 bytes, little endian)
    offset 4  block size (2 bytes, little endian; 0 means 512)

followed by fixed-size blocks. A dBase III value is written at the next
free block, terminated by 0x1A 0x1A and zero padded to a block boundary,
so one value may span several blocks. Blocks are never reused.
"""

import logging
import os
import struct
from typing import BinaryIO

from dbf_errors import DBFFormatError, DBFRangeError, DBFUnsupportedFormatError


logger = logging.getLogger(__name__)

# Constants
DBF_MEMO_BLOCK_SIZE = 512
DBF_MEMO_HEADER_SIZE = 6
DBF_MEMO_SENTINEL = b'\x1A\x1A'
DBF_VERSION_DBASE3_MEMO = 0x83
MEMO_TEXT_ENCODING = 'utf-8'


def dbf_memo_filename(dbf_filename: str) -> str:
    """
    Get the memo file path belonging to a table path.

    The extension is replaced by .dbt (or .DBT when the table extension
    is not all lower case). A path without extension gets .DBT appended.
    """
    base, ext = os.path.splitext(dbf_filename)
    if not ext:
        return dbf_filename + '.DBT'
    return base + ('.dbt' if ext[1:].islower() else '.DBT')


class DBFMemoFile:
    """
    Base class of memo file formats.

    Subclasses implement read_bytes / append_bytes; text is stored as UTF-8.
    """

    def __init__(self, stream: BinaryIO, owns_stream: bool = True):
        self.stream = stream
        self.owns_stream = owns_stream
        self.is_open = True

    @property
    def block_size(self) -> int:
        raise NotImplementedError

    @property
    def next_block(self) -> int:
        raise NotImplementedError

    def read_bytes(self, index: int) -> bytes:
        raise NotImplementedError

    def append_bytes(self, data: bytes) -> int:
        raise NotImplementedError

    def read_text(self, index: int) -> str:
        return self.read_bytes(index).decode(MEMO_TEXT_ENCODING, errors='replace')

    def append_text(self, text: str) -> int:
        return self.append_bytes(text.encode(MEMO_TEXT_ENCODING))

    def __getitem__(self, index: int) -> str:
        return self.read_text(index)

    def flush(self) -> None:
        if self.is_open:
            self.stream.flush()

    def close(self) -> None:
        """Close the memo file; a stream owned by the caller is only flushed."""
        if not self.is_open:
            return
        self.stream.flush()
        if self.owns_stream:
            self.stream.close()
        self.is_open = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class DBFMemoFileV3(DBFMemoFile):
    """dBase III memo file: sentinel terminated values, no per-value header."""

    def __init__(self, stream: BinaryIO, owns_stream: bool = True):
        super().__init__(stream, owns_stream)
        self._read_header()

    @classmethod
    def create(cls, stream: BinaryIO, block_size: int = DBF_MEMO_BLOCK_SIZE,
               owns_stream: bool = True) -> 'DBFMemoFileV3':
        """Write an empty memo file (header block only) and open it."""
        if not DBF_MEMO_HEADER_SIZE <= block_size <= 0xFFFF:
            raise DBFFormatError(f"Invalid memo block size {block_size}")
        buf = bytearray(block_size)
        buf[0:4] = struct.pack("<L", 1)  # first block after header
        buf[4:6] = struct.pack("<H", block_size)
        stream.seek(0)
        stream.truncate()
        stream.write(buf)
        stream.flush()
        return cls(stream, owns_stream)

    def _read_header(self) -> None:
        self.stream.seek(0)
        buf = self.stream.read(DBF_MEMO_HEADER_SIZE)
        if len(buf) < DBF_MEMO_HEADER_SIZE:
            raise DBFFormatError("Memo file header is truncated")
        next_block = struct.unpack_from("<L", buf, 0)[0]
        block_size = struct.unpack_from("<H", buf, 4)[0]
        # dBase III writers often leave the block size at 0
        self._block_size = block_size or DBF_MEMO_BLOCK_SIZE
        self._next_block = max(next_block, 1)

    def _write_header(self) -> None:
        self.stream.seek(0)
        self.stream.write(struct.pack("<L", self._next_block))

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def next_block(self) -> int:
        return self._next_block

    def read_bytes(self, index: int) -> bytes:
        """
        Read the value starting at a block.

        Args:
            index: Block number (1 <= index < next_block)

        Returns:
            The bytes before the 0x1A 0x1A sentinel
        """
        if not 1 <= index < self._next_block:
            raise DBFRangeError(f"Memo block {index} out of range (1..{self._next_block - 1})")

        self.stream.seek(index * self._block_size)
        data = bytearray()
        while True:
            block = self.stream.read(self._block_size)
            if not block:
                logger.warning("Memo block %d: end of file before terminator", index)
                return bytes(data)
            # The sentinel may straddle two blocks
            search_from = max(0, len(data) - 1)
            data += block
            end = data.find(DBF_MEMO_SENTINEL, search_from)
            if end >= 0:
                return bytes(data[:end])

    def append_bytes(self, data: bytes) -> int:
        """
        Append a value at the next free block.

        Returns:
            The first block number used
        """
        payload = bytes(data) + DBF_MEMO_SENTINEL
        blocks_needed = (len(payload) + self._block_size - 1) // self._block_size
        payload = payload.ljust(blocks_needed * self._block_size, b'\x00')

        start_block = self._next_block
        self.stream.seek(start_block * self._block_size)
        self.stream.write(payload)
        self._next_block = start_block + blocks_needed
        self._write_header()
        logger.debug("Memo: wrote %d bytes at block %d (%d blocks)", len(data), start_block, blocks_needed)
        return start_block


def _memo_class(version: int):
    if version == DBF_VERSION_DBASE3_MEMO:
        return DBFMemoFileV3
    raise DBFUnsupportedFormatError(f"Memo files for version 0x{version:02X} are not supported")


def dbf_memo_open(stream: BinaryIO, version: int, owns_stream: bool = True) -> DBFMemoFile:
    """
    Open a memo file for a table version.

    Args:
        stream: Readable, writable, seekable binary stream
        version: Version byte of the table
        owns_stream: Close the stream when the memo file is closed

    Returns:
        A DBFMemoFile for that dialect
    """
    return _memo_class(version)(stream, owns_stream)


def dbf_memo_create(stream: BinaryIO, version: int, block_size: int = DBF_MEMO_BLOCK_SIZE,
                    owns_stream: bool = True) -> DBFMemoFile:
    """Initialize an empty memo file for a table version and open it."""
    return _memo_class(version).create(stream, block_size, owns_stream)


__all__ = [
    'DBF_MEMO_BLOCK_SIZE', 'DBF_MEMO_SENTINEL', 'DBF_VERSION_DBASE3_MEMO',
    'DBFMemoFile', 'DBFMemoFileV3',
    'dbf_memo_filename', 'dbf_memo_open', 'dbf_memo_create',
]
