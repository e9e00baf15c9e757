import math

import pytest

from derasn.core import (
    Any,
    Class,
    ConstructUnexpectedError,
    Header,
    InvalidLengthError,
    InvalidValueError,
    Length,
    Tag,
    UnexpectedTagError,
)
from derasn.real import Real, RealKind, float32_from_any, float_from_any


def real_any(content: bytes) -> Any:
    return Any.from_tag_and_data(Tag.REAL_TYPE, content)


def test_special_values_from_float():
    assert Real.from_float(math.inf).kind is RealKind.INFINITY
    assert Real.from_float(-math.inf).kind is RealKind.NEG_INFINITY
    assert Real.from_float(0.0).kind is RealKind.ZERO
    assert Real.from_float(-0.0).kind is RealKind.ZERO


def test_infinity_contents():
    assert Real.from_float(math.inf).der_content() == b"\x40"
    assert Real.from_float(-math.inf).der_content() == b"\x41"
    assert Real.from_float(0.0).der_content() == b""


def test_nan_rejected():
    with pytest.raises(ValueError):
        Real.from_float(math.nan)


def test_is_infinite_and_finite():
    assert Real.from_float(math.inf).is_infinite()
    assert not Real.from_float(math.inf).is_finite()
    assert Real.from_float(1.5).is_finite()
    assert Real.from_float(0.0).is_finite()
    assert not Real.binary(3.0, 2, 1).is_infinite()


def test_decimal_form_with_zero_exponent():
    assert Real.from_float(7.0).der_content() == b"\x037E+0"


def test_decimal_is_normalized():
    real = Real.from_float(100.0)
    assert real.base == 10
    assert real.mantissa % 10 != 0
    assert real.to_float() == pytest.approx(100.0)


@pytest.mark.parametrize("value", [0.5, 1.5, -2.25, 100.0, 3.0, 1e10, -7.0, 0.125])
def test_decimal_round_trip(value):
    real = Real.from_float(value)
    rem, decoded = Real.from_der(real.to_der())
    assert rem == b""
    assert decoded == real
    assert decoded.to_float() == pytest.approx(value)


@pytest.mark.parametrize("value", [math.inf, -math.inf, 0.0])
def test_special_round_trip(value):
    real = Real.from_float(value)
    _, decoded = Real.from_der(real.to_der())
    assert decoded == real
    assert decoded.to_float() == value


def test_binary_round_trip_and_value():
    real = Real.binary(3.0, 2, 1)
    _, decoded = Real.from_der(real.to_der())
    assert decoded == real
    assert decoded.to_float() == 6.0


@pytest.mark.parametrize("exponent", [1, -1, 0, 300, -300, 70000, -70000])
def test_binary_exponent_round_trip(exponent):
    real = Real.binary(5.0, 2, exponent)
    _, decoded = Real.from_der(real.to_der())
    assert decoded == real


def test_binary_negative_round_trip():
    real = Real.binary(-5.0, 2, 3)
    _, decoded = Real.from_der(real.to_der())
    assert decoded == real
    assert decoded.to_float() == real.to_float()


def test_binary_fractional_mantissa_keeps_value():
    real = Real.binary(0.75, 2, 0)
    _, decoded = Real.from_der(real.to_der())
    assert decoded.to_float() == real.to_float()


@pytest.mark.parametrize("enc_base", [8, 16])
def test_encoding_base_survives_round_trip(enc_base):
    real = Real.binary(5.0, 2, 8).with_enc_base(enc_base)
    assert real.enc_base == enc_base
    _, decoded = Real.from_der(real.to_der())
    assert decoded.enc_base == enc_base


def test_with_enc_base_ignores_special_values():
    inf = Real.from_float(math.inf)
    assert inf.with_enc_base(8) == inf


def test_decode_empty_is_zero():
    assert Real.from_any(real_any(b"")).kind is RealKind.ZERO


def test_decode_negative_infinity():
    assert Real.from_any(real_any(b"\x41")).kind is RealKind.NEG_INFINITY


def test_decode_invalid_special_value():
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(b"\x42"))


def test_decode_special_value_with_extra_bytes():
    with pytest.raises(InvalidLengthError):
        Real.from_any(real_any(b"\x40\x00"))


def test_decode_sign_bit():
    real = Real.from_any(real_any(b"\xc0\x00\x03"))
    assert real.mantissa == -3.0
    assert real.exponent == 0


def test_decode_illegal_base():
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(b"\xb0\x01\x01"))


def test_decode_truncated_exponent():
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(b"\x80\x01"))


def test_decode_mantissa_too_large():
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(b"\x80\x00" + b"\x01" * 9))


def test_decode_nr1():
    assert Real.from_any(real_any(b"\x0142")).to_float() == 42.0


def test_decode_nr1_rejects_fraction():
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(b"\x014.2"))


def test_decode_nr3():
    assert Real.from_any(real_any(b"\x031.5E1")).to_float() == pytest.approx(15.0)


@pytest.mark.parametrize("content", [b"\x03 1.5", b"\x031_5", b"\x03nan", b"\x03abc", b"\x0012"])
def test_decode_bad_decimal(content):
    with pytest.raises(InvalidValueError):
        Real.from_any(real_any(content))


def test_decode_wrong_tag():
    with pytest.raises(UnexpectedTagError):
        Real.from_any(Any.from_tag_and_data(Tag.INTEGER, b"\x01"))


def test_check_constraints_rejects_constructed():
    obj = Any(Header(Class.UNIVERSAL, True, Tag.REAL_TYPE, Length(0)), b"")
    with pytest.raises(ConstructUnexpectedError):
        Real.check_constraints(obj)


def test_unsupported_base_cannot_be_written():
    with pytest.raises(InvalidValueError):
        Real(RealKind.BINARY, 1.0, 3, 0, 2).der_content()


def test_zero_binary_mantissa_cannot_be_written():
    with pytest.raises(InvalidValueError):
        Real.binary(0.0, 2, 0).der_content()


def test_to_float_overflow_is_infinite():
    value = Real.binary(1.0, 2, 5000).to_float()
    assert value == math.inf


def test_to_float32_overflow_is_infinite():
    value = Real.binary(1.0, 10, 300).to_float32()
    assert value == math.inf


def test_to_float32_exact_value():
    real = Real.binary(3.0, 2, 1)
    assert real.to_float32() == real.to_float()


def test_float_helpers():
    real = Real.binary(3.0, 2, 1)
    _, obj = Any.from_der(real.to_der())
    assert float_from_any(obj) == real.to_float()
    assert float32_from_any(obj) == real.to_float32()


def test_float_helper_wrong_tag():
    with pytest.raises(UnexpectedTagError):
        float_from_any(Any.from_tag_and_data(Tag.BOOLEAN, b"\x00"))