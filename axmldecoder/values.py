"""
Typed attribute values (`Res_value`).

Every value read from an attribute or a CDATA chunk becomes one of the frozen
classes below. Data types without a dedicated class are kept as
`OtherValue`, so nothing is dropped even though it can not be interpreted
without a resource table.
"""
from dataclasses import dataclass
from struct import pack, unpack
from typing import ClassVar

from loguru import logger

from .constants import (
    COMPLEX_UNIT_MASK,
    DIMENSION_UNITS,
    FRACTION_UNITS,
    RADIX_MULTS,
    TYPE_FIRST_COLOR_INT,
    TYPE_FIRST_INT,
    TYPE_LAST_COLOR_INT,
    TYPE_LAST_INT,
    ValueType,
)
from .cursor import ByteCursor
from .stringpool import StringPool


def complex_to_float(xcomplex: int) -> float:
    return float(xcomplex & 0xFFFFFF00) * RADIX_MULTS[(xcomplex >> 4) & 3]


def to_signed(data: int) -> int:
    return (0x7FFFFFFF & data) - 0x80000000 if data > 0x7FFFFFFF else data


def _fmt_package(data: int) -> str:
    # prefix for attributes/references from the android library
    return "android:" if data >> 24 == 1 else ""


class TypedValue:
    """Base class of all decoded values"""

    data_type: ClassVar[int]

    @property
    def data(self) -> int:
        """The raw 32 bit payload as found in the file"""
        raise NotImplementedError

    def format(self, pool: StringPool) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class StringValue(TypedValue):
    index: int

    data_type: ClassVar[int] = ValueType.STRING

    @property
    def data(self) -> int:
        return self.index

    def format(self, pool: StringPool) -> str:
        return pool[self.index]


@dataclass(frozen=True)
class IntDecimal(TypedValue):
    value: int

    data_type: ClassVar[int] = ValueType.INT_DEC

    @property
    def data(self) -> int:
        return self.value & 0xFFFFFFFF

    def format(self, pool: StringPool) -> str:
        return "%d" % self.value


@dataclass(frozen=True)
class IntHex(TypedValue):
    value: int

    data_type: ClassVar[int] = ValueType.INT_HEX

    @property
    def data(self) -> int:
        return self.value

    def format(self, pool: StringPool) -> str:
        return "0x%08X" % self.value


@dataclass(frozen=True)
class BooleanValue(TypedValue):
    value: bool
    raw: int = 0xFFFFFFFF

    data_type: ClassVar[int] = ValueType.INT_BOOLEAN

    @property
    def data(self) -> int:
        return self.raw

    def format(self, pool: StringPool) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class FloatValue(TypedValue):
    value: float
    raw: int = 0

    data_type: ClassVar[int] = ValueType.FLOAT

    @property
    def data(self) -> int:
        return self.raw

    def format(self, pool: StringPool) -> str:
        return "%f" % self.value


@dataclass(frozen=True)
class ReferenceValue(TypedValue):
    """A resource id. It is never resolved, there is no resource table."""

    resource_id: int

    data_type: ClassVar[int] = ValueType.REFERENCE

    @property
    def data(self) -> int:
        return self.resource_id

    def format(self, pool: StringPool) -> str:
        return "@{}{:08X}".format(_fmt_package(self.resource_id), self.resource_id)


@dataclass(frozen=True)
class NullValue(TypedValue):
    # 0 is "undefined", 1 is an explicitly empty value
    raw: int = 0

    data_type: ClassVar[int] = ValueType.NULL

    @property
    def data(self) -> int:
        return self.raw

    def format(self, pool: StringPool) -> str:
        return ""


@dataclass(frozen=True)
class OtherValue(TypedValue):
    """Any data type this decoder does not interpret, kept verbatim."""

    type_tag: int
    raw: int

    @property
    def data_type(self) -> int:
        return self.type_tag

    @property
    def data(self) -> int:
        return self.raw

    def format(self, pool: StringPool) -> str:
        return format_other(self.type_tag, self.raw)


def format_other(_type: int, _data: int) -> str:
    """
    Textual form of the data types without their own value class,
    the way aapt prints them.
    """
    if _type == ValueType.ATTRIBUTE:
        return "?{}{:08X}".format(_fmt_package(_data), _data)

    elif _type == ValueType.DIMENSION and (_data & COMPLEX_UNIT_MASK) < len(DIMENSION_UNITS):
        return "{:f}{}".format(
            complex_to_float(_data), DIMENSION_UNITS[_data & COMPLEX_UNIT_MASK]
        )

    elif _type == ValueType.FRACTION and (_data & COMPLEX_UNIT_MASK) < len(FRACTION_UNITS):
        return "{:f}{}".format(
            complex_to_float(_data) * 100,
            FRACTION_UNITS[_data & COMPLEX_UNIT_MASK],
        )

    elif TYPE_FIRST_COLOR_INT <= _type <= TYPE_LAST_COLOR_INT:
        return "#%08X" % _data

    elif TYPE_FIRST_INT <= _type <= TYPE_LAST_INT:
        return "%d" % to_signed(_data)

    return "<0x{:X}, type 0x{:02X}>".format(_data, _type)


def decode_typed_value(data_type: int, data: int) -> TypedValue:
    """
    Map a raw `Res_value` onto its value class.

    String indices are not checked here, see `read_typed_value`.
    """
    if data_type == ValueType.STRING:
        return StringValue(data)
    elif data_type == ValueType.INT_DEC:
        return IntDecimal(to_signed(data))
    elif data_type == ValueType.INT_HEX:
        return IntHex(data)
    elif data_type == ValueType.INT_BOOLEAN:
        return BooleanValue(data != 0, data)
    elif data_type == ValueType.FLOAT:
        return FloatValue(unpack("<f", pack("<I", data))[0], data)
    elif data_type == ValueType.REFERENCE:
        return ReferenceValue(data)
    elif data_type == ValueType.NULL:
        return NullValue(data)
    return OtherValue(data_type, data)


def read_typed_value(cursor: ByteCursor, pool: StringPool, chunk_type=None) -> TypedValue:
    """
    Read a `Res_value`:

    * uint16_t size
    * uint8_t res0 -> always zero
    * uint8_t dataType
    * uint32_t data

    :raises InvalidReferenceError: if a string value points outside of the pool
    """
    offset = cursor.tell()
    size = cursor.read_u16()
    res0 = cursor.read_u8()
    data_type = cursor.read_u8()
    data = cursor.read_u32()
    logger.debug(
        "typed value: size={} res0={} dataType=0x{:02x} data=0x{:08x}",
        size, res0, data_type, data,
    )
    if data_type == ValueType.STRING:
        pool.required_index(data, offset=offset, chunk_type=chunk_type)
    return decode_typed_value(data_type, data)
