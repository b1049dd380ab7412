from typing import Iterator, Union

from loguru import logger

from .chunk import ChunkHeader
from .constants import (
    NO_INDEX,
    STRING_POOL_HEADER_SIZE,
    UTF8_FLAG,
    UTF16_LONG_LENGTH_BIT,
)
from .cursor import ByteCursor
from .exceptions import (
    InvalidChunkError,
    InvalidReferenceError,
    InvalidStringError,
    UnsupportedEncodingError,
    UnsupportedLengthError,
)


class StringPool:
    """
    StringPool is a CHUNK inside an AXML File: `ResStringPool_header`
    It contains all strings, which are used by referencing to ID's

    The pool is decoded completely when it is read and never changes
    afterwards. Style spans are not decoded.

    See http://androidxref.com/9.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#436
    """

    __slots__ = ("_strings", "flags", "style_count")

    def __init__(self, strings, flags: int = 0, style_count: int = 0) -> None:
        self._strings = tuple(strings)
        self.flags = flags
        self.style_count = style_count

    @classmethod
    def read(cls, cursor: ByteCursor, header: ChunkHeader) -> "StringPool":
        """
        :param cursor: cursor over the buffer which holds the string pool chunk
        :param header: the already validated header of the chunk
        :raises UnsupportedEncodingError: for UTF-8 string pools
        :raises UnsupportedLengthError: for strings longer than 0x7FFF units
        :raises InvalidStringError: if a string is not valid UTF-16
        """
        if header.header_size < STRING_POOL_HEADER_SIZE:
            raise InvalidChunkError(
                "String chunk header size {} is smaller than {}".format(
                    header.header_size, STRING_POOL_HEADER_SIZE
                ),
                offset=header.start,
                chunk_type=header.chunk_type,
            )
        body = header.body(cursor)
        string_count = body.read_u32()
        style_count = body.read_u32()
        flags = body.read_u32()
        # Both offsets are counted from the beginning of the chunk
        strings_start = body.read_u32()
        styles_start = body.read_u32()

        logger.debug(
            "string pool: stringCount={} styleCount={} flags=0x{:x} stringsStart=0x{:x} stylesStart=0x{:x}",
            string_count, style_count, flags, strings_start, styles_start,
        )

        if flags & UTF8_FLAG:
            raise UnsupportedEncodingError(
                "utf8 string pool",
                offset=header.start,
                chunk_type=header.chunk_type,
            )

        if style_count:
            logger.debug("Skipping {} style entries", style_count)
        elif styles_start:
            logger.info(
                "Styles Offset given, but styleCount is zero. "
                "This is not a problem but could indicate packers."
            )

        # Next, there is a list of offsets (4 byte each) following the header.
        offsets = header.payload(cursor)
        string_offsets = [offsets.read_u32() for _ in range(string_count)]

        strings = []
        if string_count:
            # if there are styles as well, we do not want to read them too.
            data_end = header.end
            if style_count and strings_start < styles_start <= header.chunk_size:
                data_end = header.start + styles_start
            data = cursor.slice(header.start + strings_start, data_end)
            for i, offset in enumerate(string_offsets):
                strings.append(cls._decode16(data, offset, header))
                logger.debug("string[{}]: {!r}", i, strings[-1])

        return cls(strings, flags=flags, style_count=style_count)

    @staticmethod
    def _decode16(data: ByteCursor, offset: int, header: ChunkHeader) -> str:
        """
        Decode an UTF-16 String at the given offset

        :param data: cursor over the string data section
        :param offset: offset of the string inside the data
        :return: the decoded string
        """
        data.seek(data.start + offset)
        position = data.tell()
        length = data.read_u16()
        if length & UTF16_LONG_LENGTH_BIT:
            raise UnsupportedLengthError(
                "string length needs the extended encoding",
                offset=position,
                chunk_type=header.chunk_type,
            )

        # The len is the string len in utf-16 units
        raw = data.read_bytes(length * 2)
        try:
            return raw.decode('utf-16-le')
        except UnicodeDecodeError as e:
            raise InvalidStringError(
                "String is not valid UTF-16: {}".format(e.reason),
                offset=position,
                chunk_type=header.chunk_type,
            ) from e

    @property
    def is_utf8(self) -> bool:
        return (self.flags & UTF8_FLAG) != 0

    @property
    def strings(self) -> tuple:
        return self._strings

    def __repr__(self):
        return "<StringPool #strings={}, #styles={}, UTF8={}>".format(
            len(self._strings), self.style_count, self.is_utf8
        )

    def __getitem__(self, idx: int) -> str:
        return self._strings[idx]

    def __len__(self):
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def check(self, idx: int, offset: Union[int, None] = None, chunk_type: Union[int, None] = None) -> None:
        """
        :raises InvalidReferenceError: if `idx` is neither the "no string" sentinel nor a valid index
        """
        if idx != NO_INDEX and not 0 <= idx < len(self._strings):
            raise InvalidReferenceError(
                "String index {} is out of range, pool has {} strings".format(
                    idx, len(self._strings)
                ),
                offset=offset,
                chunk_type=chunk_type,
            )

    def optional_index(self, idx: int, offset: Union[int, None] = None, chunk_type: Union[int, None] = None) -> Union[int, None]:
        """
        Validate an index which may be absent.

        :return: `None` for the "no string" sentinel, the index otherwise
        """
        self.check(idx, offset, chunk_type)
        return None if idx == NO_INDEX else idx

    def required_index(self, idx: int, offset: Union[int, None] = None, chunk_type: Union[int, None] = None) -> int:
        if idx == NO_INDEX:
            raise InvalidReferenceError(
                "Missing string index",
                offset=offset,
                chunk_type=chunk_type,
            )
        self.check(idx, offset, chunk_type)
        return idx

    def get(self, idx: Union[int, None]) -> Union[str, None]:
        """
        Return the string at the index in the string table

        :param idx: index in the string table, `None` for no string
        :raises InvalidReferenceError: if the index is out of range
        :return: the string, or `None` if no index is given
        """
        if idx is None:
            return None
        self.check(idx)
        if idx == NO_INDEX:
            return None
        return self._strings[idx]
