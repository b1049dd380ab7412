from loguru import logger

from .constants import CHUNK_HEADER_SIZE, chunk_type_name
from .cursor import ByteCursor
from .exceptions import InvalidChunkError, TruncatedChunkError


class ChunkHeader:
    """
    Object which contains a Resource Chunk.
    This is an implementation of the `ResChunk_header`.

    See http://androidxref.com/9.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#196
    """

    # This is the minimal size such a header must have. There might be other header data too!
    SIZE = CHUNK_HEADER_SIZE

    __slots__ = ("start", "chunk_type", "header_size", "chunk_size")

    def __init__(self, start: int, chunk_type: int, header_size: int, chunk_size: int) -> None:
        self.start = start
        self.chunk_type = chunk_type
        self.header_size = header_size
        self.chunk_size = chunk_size

    @classmethod
    def read(cls, cursor: ByteCursor) -> "ChunkHeader":
        """
        Read the header at the cursor position and check it against the
        remaining bytes of the cursor.

        :raises InvalidChunkError: if the declared sizes are inconsistent
        :raises TruncatedChunkError: if the chunk does not fit into the cursor range
        :param cursor: cursor set to the position where the header starts
        """
        start = cursor.tell()
        chunk_type = cursor.read_u16()
        header_size = cursor.read_u16()
        chunk_size = cursor.read_u32()
        header = cls(start, chunk_type, header_size, chunk_size)
        logger.debug("chunk header {}", header)

        # Assert that the read data will fit into the chunk.
        # The total size must be equal or larger than the header size
        if header_size < cls.SIZE:
            raise InvalidChunkError(
                "declared header size {} is smaller than required size of {}".format(
                    header_size, cls.SIZE
                ),
                offset=start,
                chunk_type=chunk_type,
            )
        if chunk_size < header_size:
            raise InvalidChunkError(
                "declared chunk size ({}) is smaller than header size ({})".format(
                    chunk_size, header_size
                ),
                offset=start,
                chunk_type=chunk_type,
            )
        available = cursor.end - start
        if chunk_size > available:
            raise TruncatedChunkError(
                "declared chunk size ({}) exceeds the {} bytes left in the buffer".format(
                    chunk_size, available
                ),
                offset=start,
                chunk_type=chunk_type,
            )
        return header

    @property
    def end(self) -> int:
        """
        Absolute offset where the chunk ends. The next chunk starts here,
        whatever the decoder of this chunk consumed.
        """
        return self.start + self.chunk_size

    @property
    def payload_start(self) -> int:
        return self.start + self.header_size

    @property
    def payload_size(self) -> int:
        return self.chunk_size - self.header_size

    def body(self, cursor: ByteCursor) -> ByteCursor:
        """
        :return: cursor limited to this chunk, positioned after the common 8 byte header
        """
        body = cursor.slice(self.start, self.end)
        body.seek(self.start + self.SIZE)
        return body

    def payload(self, cursor: ByteCursor) -> ByteCursor:
        return cursor.slice(self.payload_start, self.end)

    def __repr__(self):
        return "<ChunkHeader idx='0x{:08x}' type='{}' header_size='{}' size='{}'>".format(
            self.start, chunk_type_name(self.chunk_type), self.header_size, self.chunk_size
        )
