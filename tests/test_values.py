from struct import pack

import pytest

from axmldecoder.constants import ValueType
from axmldecoder.cursor import ByteCursor
from axmldecoder.exceptions import InvalidReferenceError
from axmldecoder.stringpool import StringPool
from axmldecoder.values import (
    BooleanValue,
    FloatValue,
    IntDecimal,
    IntHex,
    NullValue,
    OtherValue,
    ReferenceValue,
    StringValue,
    complex_to_float,
    decode_typed_value,
    read_typed_value,
)
from axml_writer import typed_value

POOL = StringPool(["first", "second"])


def read(data_type, data):
    return read_typed_value(ByteCursor(typed_value(data_type, data)), POOL)


class TestTypedValue(object):

    def test_string(self):
        value = read(ValueType.STRING, 1)
        assert value == StringValue(1)
        assert value.format(POOL) == "second"

    def test_string_out_of_range(self):
        with pytest.raises(InvalidReferenceError):
            read(ValueType.STRING, 2)

    def test_int_dec_is_signed(self):
        assert read(ValueType.INT_DEC, 42) == IntDecimal(42)
        value = read(ValueType.INT_DEC, 0xFFFFFFFE)
        assert value == IntDecimal(-2)
        assert value.format(POOL) == "-2"
        assert value.data == 0xFFFFFFFE

    def test_int_hex(self):
        value = read(ValueType.INT_HEX, 0x10)
        assert value == IntHex(0x10)
        assert value.format(POOL) == "0x00000010"

    def test_boolean(self):
        assert read(ValueType.INT_BOOLEAN, 0xFFFFFFFF).value is True
        assert read(ValueType.INT_BOOLEAN, 0).value is False
        assert read(ValueType.INT_BOOLEAN, 0).format(POOL) == "false"
        assert isinstance(read(ValueType.INT_BOOLEAN, 1), BooleanValue)

    def test_float(self):
        data = int.from_bytes(pack("<f", 1.5), "little")
        value = read(ValueType.FLOAT, data)
        assert isinstance(value, FloatValue)
        assert value.value == 1.5
        assert value.data == data
        assert value.format(POOL) == "1.500000"

    def test_reference_is_not_resolved(self):
        value = read(ValueType.REFERENCE, 0x7F010000)
        assert value == ReferenceValue(0x7F010000)
        assert value.format(POOL) == "@7F010000"
        assert ReferenceValue(0x01010000).format(POOL) == "@android:01010000"

    def test_null(self):
        assert read(ValueType.NULL, 0) == NullValue(0)
        assert read(ValueType.NULL, 0).format(POOL) == ""

    def test_unknown_type_is_preserved(self):
        value = read(0x99, 5)
        assert value == OtherValue(0x99, 5)
        assert value.data_type == 0x99
        assert value.data == 5
        assert value.format(POOL) == "<0x5, type 0x99>"

    @pytest.mark.parametrize("data_type, data, text", [
        (ValueType.ATTRIBUTE, 0x01010098, "?android:01010098"),
        (ValueType.DIMENSION, 0x00001001, "16.000000dip"),
        (ValueType.FRACTION, 0x00008000, "12800.000000%"),
        (ValueType.INT_COLOR_ARGB8, 0xFF00FF00, "#FF00FF00"),
        (ValueType.DYNAMIC_REFERENCE, 3, "<0x3, type 0x07>"),
    ])
    def test_other_value_formats(self, data_type, data, text):
        value = decode_typed_value(data_type, data)
        assert isinstance(value, OtherValue)
        assert value.format(POOL) == text

    def test_complex_to_float(self):
        assert complex_to_float(0x00001001) == 16.0

    def test_values_are_frozen(self):
        value = IntDecimal(1)
        with pytest.raises(AttributeError):
            value.value = 2
