import pytest

from derasn.core import (
    Any,
    Class,
    DerConstraint,
    DerConstraintError,
    Header,
    IntegerNegativeError,
    IntegerTooLargeError,
    Length,
    Tag,
    UnexpectedTagError,
)
from derasn.integer import (
    Integer,
    check_der_int_constraints,
    decode_signed,
    decode_unsigned,
    encode_der_int,
    parse_der_signed,
    parse_der_unsigned,
    trim_slice,
)

I0_BYTES = bytes([0x02, 0x01, 0x00])
I127_BYTES = bytes([0x02, 0x01, 0x7F])
I128_BYTES = bytes([0x02, 0x02, 0x00, 0x80])
I256_BYTES = bytes([0x02, 0x02, 0x01, 0x00])
INEG128_BYTES = bytes([0x02, 0x01, 0x80])
INEG129_BYTES = bytes([0x02, 0x02, 0xFF, 0x7F])
I255_BYTES = bytes([0x02, 0x02, 0x00, 0xFF])
I32767_BYTES = bytes([0x02, 0x02, 0x7F, 0xFF])
I65535_BYTES = bytes([0x02, 0x03, 0x00, 0xFF, 0xFF])
INEG32768_BYTES = bytes([0x02, 0x02, 0x80, 0x00])


@pytest.mark.parametrize(
    "encoded, expected",
    [(I0_BYTES, 0), (I127_BYTES, 127), (INEG128_BYTES, -128)],
)
def test_decode_i8(encoded, expected):
    assert parse_der_signed(encoded, 8) == (b"", expected)


@pytest.mark.parametrize(
    "value, encoded",
    [(0, I0_BYTES), (127, I127_BYTES), (-128, INEG128_BYTES)],
)
def test_encode_i8(value, encoded):
    assert encode_der_int(value) == encoded


I16_CASES = [
    (I0_BYTES, 0),
    (I127_BYTES, 127),
    (I128_BYTES, 128),
    (I255_BYTES, 255),
    (I256_BYTES, 256),
    (I32767_BYTES, 32767),
    (INEG128_BYTES, -128),
    (INEG129_BYTES, -129),
    (INEG32768_BYTES, -32768),
]


@pytest.mark.parametrize("encoded, expected", I16_CASES)
def test_decode_i16(encoded, expected):
    assert parse_der_signed(encoded, 16)[1] == expected


@pytest.mark.parametrize("encoded, value", I16_CASES)
def test_encode_i16(encoded, value):
    assert encode_der_int(value) == encoded


@pytest.mark.parametrize(
    "encoded, expected",
    [(I0_BYTES, 0), (I127_BYTES, 127), (I255_BYTES, 255)],
)
def test_decode_u8(encoded, expected):
    assert parse_der_unsigned(encoded, 8)[1] == expected


@pytest.mark.parametrize(
    "value, encoded",
    [(0, I0_BYTES), (127, I127_BYTES), (255, I255_BYTES)],
)
def test_encode_u8(value, encoded):
    assert encode_der_int(value) == encoded


U16_CASES = [
    (I0_BYTES, 0),
    (I127_BYTES, 127),
    (I255_BYTES, 255),
    (I256_BYTES, 256),
    (I32767_BYTES, 32767),
    (I65535_BYTES, 65535),
]


@pytest.mark.parametrize("encoded, expected", U16_CASES)
def test_decode_u16(encoded, expected):
    assert parse_der_unsigned(encoded, 16)[1] == expected


@pytest.mark.parametrize("encoded, value", U16_CASES)
def test_encode_u16(encoded, value):
    assert encode_der_int(value) == encoded


@pytest.mark.parametrize("bits", [8, 16])
def test_reject_non_canonical(bits):
    data = bytes([0x02, 0x02, 0x00, 0x00])
    with pytest.raises(DerConstraintError):
        parse_der_signed(data, bits)
    with pytest.raises(DerConstraintError):
        parse_der_unsigned(data, bits)


def test_declare_int():
    assert Integer.from_int(1234).as_signed(32) == 1234
    assert Integer.from_int(1234).data == bytes([0x04, 0xD2])


def test_trim_slice():
    assert trim_slice(bytes([0x7F, 0xFF, 0x00, 0x02])) == bytes([0x7F, 0xFF, 0x00, 0x02])
    assert trim_slice(b"") == b""
    assert trim_slice(bytes([0])) == bytes([0])
    assert trim_slice(bytes([0, 0, 0])) == bytes([0])
    assert trim_slice(bytes([0, 0, 1])) == bytes([1])
    assert trim_slice(bytes([0xFF])) == bytes([0xFF])
    assert trim_slice(bytes([0xFF, 0xFF, 0xFF])) == bytes([0xFF])
    assert trim_slice(bytes([0xFF, 0xFF, 1])) == bytes([0xFF, 1])
    assert trim_slice(bytes([0xFF, 0xFF, 0x80, 1])) == bytes([0x80, 1])


def test_from_int_small_values():
    assert Integer.from_int(4).data == bytes([4])
    assert Integer.from_int(-2).data == bytes([0xFE])
    assert Integer.from_int(4).to_der() == bytes([2, 1, 4])


def test_conversion_too_large():
    i = Integer(bytes([0x12, 0x34, 0x56, 0x78]))
    assert i.as_unsigned(32) == 0x12345678
    with pytest.raises(IntegerTooLargeError):
        i.as_unsigned(16)


def test_signed_overflow():
    with pytest.raises(IntegerTooLargeError):
        parse_der_signed(I128_BYTES, 8)
    with pytest.raises(IntegerTooLargeError):
        parse_der_signed(I65535_BYTES, 16)
    with pytest.raises(IntegerTooLargeError):
        parse_der_signed(INEG129_BYTES, 8)


def test_negative_to_unsigned():
    with pytest.raises(IntegerNegativeError):
        parse_der_unsigned(INEG128_BYTES, 16)
    with pytest.raises(IntegerNegativeError):
        Integer.from_int(-5).as_biguint()


def test_bigint_values():
    big = 2**100 + 7
    i = Integer.from_int(big)
    assert i.as_bigint() == big
    assert i.as_biguint() == big
    assert Integer.from_int(-big).as_bigint() == -big
    assert int(Integer.from_int(-300)) == -300


@pytest.mark.parametrize("value", [0, 1, -1, 127, 128, -128, -129, 2**63, -(2**63), 2**127 - 1])
def test_der_round_trip(value):
    rem, parsed = Integer.from_der(encode_der_int(value))
    assert rem == b""
    assert parsed.as_bigint() == value


def test_integer_from_der_with_remainder():
    rem, parsed = Integer.from_der(I128_BYTES + b"\xAA")
    assert rem == b"\xAA"
    assert parsed == Integer(bytes([0x00, 0x80]))


def test_integer_any():
    obj = Integer.from_int(1).any()
    assert obj.tag == Tag.INTEGER
    assert obj.data == bytes([1])
    assert obj.header.length == Length(1)


def test_from_any_wrong_tag():
    obj = Any.from_tag_and_data(Tag.BOOLEAN, b"\x01")
    with pytest.raises(UnexpectedTagError):
        Integer.from_any(obj)
    with pytest.raises(UnexpectedTagError):
        decode_unsigned(obj, 8)
    with pytest.raises(UnexpectedTagError):
        decode_signed(obj, 8)


def test_check_constraints_errors():
    def make(data):
        return Any(Header(Class.UNIVERSAL, False, Tag.INTEGER, Length(len(data))), data)

    with pytest.raises(DerConstraintError) as err:
        check_der_int_constraints(make(b""))
    assert err.value.constraint is DerConstraint.INTEGER_EMPTY
    with pytest.raises(DerConstraintError) as err:
        Integer.check_constraints(make(bytes([0x00, 0x01])))
    assert err.value.constraint is DerConstraint.INTEGER_LEADING_ZEROES
    with pytest.raises(DerConstraintError) as err:
        check_der_int_constraints(make(bytes([0xFF, 0x80])))
    assert err.value.constraint is DerConstraint.INTEGER_LEADING_FF


def test_invalid_bit_width():
    with pytest.raises(ValueError):
        Integer.from_int(1).as_unsigned(12)
    with pytest.raises(ValueError):
        Integer.from_int(1).as_signed(0)