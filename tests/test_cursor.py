from struct import pack

import pytest

from axmldecoder.chunk import ChunkHeader
from axmldecoder.cursor import ByteCursor
from axmldecoder.exceptions import (
    InvalidChunkError,
    TruncatedChunkError,
    UnexpectedEofError,
)


class TestByteCursor(object):

    def test_little_endian_reads(self):
        cursor = ByteCursor(b"\x01\x02\x03\x04\x05\x06\x07\xff\xff\xff\xff")
        assert cursor.read_u8() == 0x01
        assert cursor.read_u16() == 0x0302
        assert cursor.read_u32() == 0x07060504
        assert cursor.tell() == 7
        assert cursor.read_i32() == -1
        assert cursor.remaining() == 0

    def test_read_past_end_does_not_advance(self):
        cursor = ByteCursor(b"\x01\x02\x03")
        cursor.read_u8()
        with pytest.raises(UnexpectedEofError) as e:
            cursor.read_u32()
        assert e.value.offset == 1
        assert cursor.tell() == 1
        assert cursor.read_u16() == 0x0302

    def test_read_bytes_and_skip(self):
        cursor = ByteCursor(bytearray(b"abcdef"))
        cursor.skip(2)
        assert cursor.read_bytes(3) == b"cde"
        with pytest.raises(UnexpectedEofError):
            cursor.read_bytes(2)
        with pytest.raises(UnexpectedEofError):
            cursor.skip(2)

    def test_slice_is_bounded(self):
        cursor = ByteCursor(b"\x00" * 4 + b"\x01\x00\x00\x00" + b"\x02\x00\x00\x00")
        inner = cursor.slice(4, 8)
        assert inner.tell() == 4
        assert inner.read_u32() == 1
        with pytest.raises(UnexpectedEofError):
            inner.read_u8()
        with pytest.raises(UnexpectedEofError):
            inner.slice(4, 12)

    def test_seek(self):
        cursor = ByteCursor(b"\x00\x01\x02\x03")
        cursor.seek(4)
        assert cursor.remaining() == 0
        cursor.seek(2)
        assert cursor.read_u8() == 2
        with pytest.raises(UnexpectedEofError):
            cursor.seek(5)


class TestChunkHeader(object):

    def test_read(self):
        cursor = ByteCursor(pack("<HHI", 0x0102, 16, 24) + b"\x00" * 16)
        header = ChunkHeader.read(cursor)
        assert header.chunk_type == 0x0102
        assert header.header_size == 16
        assert header.chunk_size == 24
        assert header.start == 0
        assert header.payload_start == 16
        assert header.end == 24
        assert cursor.tell() == 8

    def test_trailing_data_is_not_part_of_the_chunk(self):
        raw = b"\xff" * 4 + pack("<HHI", 0x0180, 8, 12) + b"\x01\x00\x00\x00" + b"\xee" * 8
        cursor = ByteCursor(raw)
        cursor.seek(4)
        header = ChunkHeader.read(cursor)
        assert header.end == 16
        payload = header.payload(cursor)
        assert payload.read_u32() == 1
        assert payload.remaining() == 0

    def test_header_size_too_small(self):
        with pytest.raises(InvalidChunkError):
            ChunkHeader.read(ByteCursor(pack("<HHI", 1, 4, 8)))

    def test_chunk_smaller_than_header(self):
        with pytest.raises(InvalidChunkError):
            ChunkHeader.read(ByteCursor(pack("<HHI", 1, 16, 12) + b"\x00" * 8))

    def test_chunk_larger_than_buffer(self):
        with pytest.raises(TruncatedChunkError) as e:
            ChunkHeader.read(ByteCursor(pack("<HHI", 3, 8, 100)))
        assert isinstance(e.value, InvalidChunkError)
        assert isinstance(e.value, UnexpectedEofError)
        assert e.value.chunk_type == 3
        assert "XML" in str(e.value)

    def test_short_header(self):
        with pytest.raises(UnexpectedEofError):
            ChunkHeader.read(ByteCursor(b"\x03\x00\x08"))
