from struct import unpack_from
from typing import Union

from .exceptions import UnexpectedEofError


class ByteCursor:
    """
    Bounds-checked reader over a little-endian byte buffer.

    The cursor never copies the buffer. `slice` returns a new cursor that
    shares it but is limited to a sub-range, so a reader handed the cursor of
    a chunk can not read past the end of that chunk.
    """

    __slots__ = ("_buff", "_pos", "_start", "_end")

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        start: int = 0,
        end: Union[int, None] = None,
    ) -> None:
        self._buff = data if isinstance(data, memoryview) else memoryview(data)
        if end is None:
            end = len(self._buff)
        if not 0 <= start <= end <= len(self._buff):
            raise ValueError("invalid cursor range [{}, {})".format(start, end))
        self._start = start
        self._end = end
        self._pos = start

    def __repr__(self):
        return "<ByteCursor pos=0x{:08x} range=[0x{:08x}, 0x{:08x})>".format(
            self._pos, self._start, self._end
        )

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    def tell(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return self._end - self._pos

    def _require(self, count: int) -> None:
        if count < 0 or self._pos + count > self._end:
            raise UnexpectedEofError(
                "Can not read {} bytes, only {} left".format(count, self.remaining()),
                offset=self._pos,
            )

    def _unpack(self, fmt: str, size: int):
        self._require(size)
        (value,) = unpack_from(fmt, self._buff, self._pos)
        self._pos += size
        return value

    def read_u8(self) -> int:
        return self._unpack('<B', 1)

    def read_u16(self) -> int:
        return self._unpack('<H', 2)

    def read_u32(self) -> int:
        return self._unpack('<I', 4)

    def read_i32(self) -> int:
        return self._unpack('<i', 4)

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        data = self._buff[self._pos : self._pos + count].tobytes()
        self._pos += count
        return data

    def skip(self, count: int) -> None:
        self._require(count)
        self._pos += count

    def seek(self, pos: int) -> None:
        """
        Move to an absolute offset inside the cursor's range.

        Seeking to the end is allowed, any read from there fails.
        """
        if not self._start <= pos <= self._end:
            raise UnexpectedEofError(
                "Seek outside of range [0x{:08x}, 0x{:08x})".format(
                    self._start, self._end
                ),
                offset=pos,
            )
        self._pos = pos

    def slice(self, start: int, end: int) -> "ByteCursor":
        """
        :param start: absolute offset of the first byte
        :param end: absolute offset after the last byte
        :return: a new cursor positioned at `start` that can not read past `end`
        """
        if not self._start <= start <= end <= self._end:
            raise UnexpectedEofError(
                "Range [0x{:08x}, 0x{:08x}) exceeds [0x{:08x}, 0x{:08x})".format(
                    start, end, self._start, self._end
                ),
                offset=start,
            )
        return ByteCursor(self._buff, start, end)
