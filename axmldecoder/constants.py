from enum import IntEnum

# Constants for AXML Files
# see http://aospxref.com/android-13.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#233


class ChunkType(IntEnum):
    NULL = 0x0000
    STRING_POOL = 0x0001
    TABLE = 0x0002
    XML = 0x0003

    XML_START_NAMESPACE = 0x0100
    XML_END_NAMESPACE = 0x0101
    XML_START_ELEMENT = 0x0102
    XML_END_ELEMENT = 0x0103
    XML_CDATA = 0x0104
    XML_LAST_CHUNK = 0x017F

    XML_RESOURCE_MAP = 0x0180

    TABLE_PACKAGE = 0x0200
    TABLE_TYPE = 0x0201
    TABLE_TYPE_SPEC = 0x0202
    TABLE_LIBRARY = 0x0203


XML_NODE_TYPES = frozenset((
    ChunkType.XML_START_NAMESPACE,
    ChunkType.XML_END_NAMESPACE,
    ChunkType.XML_START_ELEMENT,
    ChunkType.XML_END_ELEMENT,
    ChunkType.XML_CDATA,
))


def chunk_type_name(chunk_type: int) -> str:
    try:
        return ChunkType(chunk_type).name
    except ValueError:
        return "0x{:04x}".format(chunk_type)


class ValueType(IntEnum):
    """Data types of a `Res_value`"""

    NULL = 0x00
    REFERENCE = 0x01
    ATTRIBUTE = 0x02
    STRING = 0x03
    FLOAT = 0x04
    DIMENSION = 0x05
    FRACTION = 0x06
    DYNAMIC_REFERENCE = 0x07
    DYNAMIC_ATTRIBUTE = 0x08
    INT_DEC = 0x10
    INT_HEX = 0x11
    INT_BOOLEAN = 0x12
    INT_COLOR_ARGB8 = 0x1C
    INT_COLOR_RGB8 = 0x1D
    INT_COLOR_ARGB4 = 0x1E
    INT_COLOR_RGB4 = 0x1F


TYPE_FIRST_INT = ValueType.INT_DEC
TYPE_LAST_INT = ValueType.INT_COLOR_RGB4
TYPE_FIRST_COLOR_INT = ValueType.INT_COLOR_ARGB8
TYPE_LAST_COLOR_INT = ValueType.INT_COLOR_RGB4

# Minimal size of any ResChunk_header
CHUNK_HEADER_SIZE = 2 + 2 + 4
# ResStringPool_header
STRING_POOL_HEADER_SIZE = 0x1C
# ResXMLTree_node: chunk header, line number, comment index
XML_NODE_HEADER_SIZE = 0x10
# ResXMLTree_attribute: ns, name, rawValue, Res_value
ATTRIBUTE_SIZE = 4 + 4 + 4 + 8
# Res_value: size, res0, dataType, data
TYPED_VALUE_SIZE = 2 + 1 + 1 + 4

# Flags in the STRING Section
SORTED_FLAG = 1 << 0
UTF8_FLAG = 1 << 8

# A string index of 0xFFFFFFFF means "no string"
NO_INDEX = 0xFFFFFFFF

# Strings longer than 0x7FFF units set this bit and use a second length unit
UTF16_LONG_LENGTH_BIT = 0x8000

RADIX_MULTS = [0.00390625, 3.051758e-005, 1.192093e-007, 4.656613e-010]
DIMENSION_UNITS = ["px", "dip", "sp", "pt", "in", "mm"]
FRACTION_UNITS = ["%", "%p"]

COMPLEX_UNIT_MASK = 0x0F

ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"
