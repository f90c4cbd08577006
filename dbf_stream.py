"""
Byte-range editing on seekable streams.

Insert or remove a span in the middle of a file without loading the whole
file into memory. Data is moved through a bounded buffer, so the span being
shifted may be much larger than the buffer.
"""

import io
import logging
from typing import BinaryIO

from dbf_errors import DBFRangeError


logger = logging.getLogger(__name__)

# Constants
STREAM_BUFFER_SIZE = 1024


def stream_length(stream: BinaryIO) -> int:
    """Get the length of a stream without moving its position."""
    old_pos = stream.tell()
    length = stream.seek(0, io.SEEK_END)
    stream.seek(old_pos)
    return length


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly size bytes; short reads are retried until EOF."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)


def stream_insert_range(stream: BinaryIO, offset: int, data: bytes,
                        buffer_size: int = STREAM_BUFFER_SIZE) -> None:
    """
    Insert data at offset, shifting every following byte to the right.

    Blocks are copied walking backward from the end of the stream, so a
    read never sees bytes that were already overwritten.

    Args:
        stream: Readable, writable, seekable binary stream
        offset: Position where data is inserted (0 <= offset <= length)
        data: Bytes to insert
        buffer_size: Size of the copy buffer
    """
    length = stream_length(stream)
    if offset < 0 or offset > length:
        raise DBFRangeError(f"Insert offset {offset} outside stream of length {length}")
    if buffer_size <= 0:
        raise ValueError("buffer_size must be positive")

    shift = len(data)
    if shift == 0:
        return

    old_pos = stream.tell()
    logger.debug("Inserting %d bytes at offset %d (stream length %d)", shift, offset, length)

    end = length
    while end > offset:
        start = max(offset, end - buffer_size)
        stream.seek(start)
        block = _read_exact(stream, end - start)
        stream.seek(start + shift)
        stream.write(block)
        end = start

    stream.seek(offset)
    stream.write(data)
    stream.seek(old_pos)


def stream_remove_range(stream: BinaryIO, offset: int, length: int,
                        buffer_size: int = STREAM_BUFFER_SIZE) -> None:
    """
    Remove length bytes at offset, shifting every following byte to the left.

    A request starting at or past the end of the stream does nothing.
    A request that starts inside the stream but ends past it is an error.

    Args:
        stream: Readable, writable, seekable binary stream
        offset: First byte to remove
        length: Number of bytes to remove
        buffer_size: Size of the copy buffer
    """
    if offset < 0 or length < 0:
        raise DBFRangeError(f"Invalid range (offset={offset}, length={length})")
    if buffer_size <= 0:
        raise ValueError("buffer_size must be positive")

    total = stream_length(stream)
    if offset >= total or length == 0:
        return
    if offset + length > total:
        raise DBFRangeError(
            f"Range {offset}..{offset + length} exceeds stream of length {total}")

    old_pos = stream.tell()
    logger.debug("Removing %d bytes at offset %d (stream length %d)", length, offset, total)

    src = offset + length
    while src < total:
        count = min(buffer_size, total - src)
        stream.seek(src)
        block = _read_exact(stream, count)
        if not block:
            break
        stream.seek(src - length)
        stream.write(block)
        src += len(block)

    stream.truncate(total - length)
    stream.seek(old_pos)


__all__ = [
    'STREAM_BUFFER_SIZE',
    'stream_length', 'stream_insert_range', 'stream_remove_range',
]
