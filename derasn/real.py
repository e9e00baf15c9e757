"""ASN.1 REAL: binary, decimal and special floating-point values."""

from __future__ import annotations

import enum
import math
import re
import struct
import sys
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import ClassVar, Tuple

from derasn.core import Any, Asn1Error, Asn1Type, InvalidLengthError, Length, Tag

_EPSILON = sys.float_info.epsilon
_U64_MAX = (1 << 64) - 1
_NR1 = re.compile(r"\+?[0-9]+")
_FORBIDDEN_IN_NUMBER = re.compile(r"[\s_]")
# encoding base bits -> (encoding base, exponent multiplier)
_ENC_BASES = {0: (2, 1), 1: (8, 3), 2: (16, 4)}


class RealKind(enum.Enum):
    """The kinds of REAL values."""

    BINARY = "binary"
    INFINITY = "infinity"
    NEG_INFINITY = "negative infinity"
    ZERO = "zero"


def _powi(base: float, exponent: int) -> float:
    try:
        return float(base) ** exponent
    except (OverflowError, ZeroDivisionError):
        return math.inf


def _float_text(value: float) -> str:
    """Shortest round-trip digits, without exponent notation or a trailing ``.0``."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _saturating_u64(value: float) -> int:
    if math.isnan(value):
        return 0
    if value >= _U64_MAX:
        return _U64_MAX
    return int(value)


def _drop_floating_point(mantissa: float, enc_base: int, exponent: int) -> Tuple[bool, int, int, int]:
    negative = math.copysign(1.0, mantissa) < 0
    exp_sign = 1 if exponent > 0 else -1
    m = abs(mantissa)
    e = exponent
    if enc_base == 8:
        e = (abs(e) // 3) * exp_sign
        m *= _powi(2.0, e)
    elif enc_base == 16:
        e = (abs(e) // 4) * exp_sign
        m *= _powi(2.0, e)
    while abs(m) > _EPSILON:
        if math.modf(m)[0] != 0.0:
            m *= enc_base
            e -= 1
        else:
            break
    return negative, _saturating_u64(m), enc_base, e


@dataclass(frozen=True)
class Real(Asn1Type):
    """A REAL value; only base 2 is supported when writing binary encodings."""

    kind: RealKind
    mantissa: float = 0.0
    base: int = 0
    exponent: int = 0
    enc_base: int = 0

    TAG: ClassVar[Tag] = Tag.REAL_TYPE

    @classmethod
    def from_float(cls, value: float) -> "Real":
        """Build a REAL from a float, as a normalized base-10 value."""
        value = float(value)
        if math.isnan(value):
            raise ValueError("NaN cannot be represented as REAL")
        if math.isinf(value):
            return cls(RealKind.INFINITY if value > 0 else RealKind.NEG_INFINITY)
        if value == 0.0:
            return cls(RealKind.ZERO)
        exponent = 0
        while math.modf(value)[0] != 0.0:
            value *= 10.0
            exponent -= 1
        return cls(RealKind.BINARY, value, 10, exponent, 10)._normalize_base10()

    @classmethod
    def binary(cls, mantissa: float, base: int, exponent: int) -> "Real":
        """A binary REAL, encoded with base 2."""
        return cls(RealKind.BINARY, float(mantissa), base, exponent, 2)

    def with_enc_base(self, enc_base: int) -> "Real":
        """The same value with another encoding base; special values are unchanged."""
        if self.kind is not RealKind.BINARY:
            return self
        return replace(self, enc_base=enc_base)

    def _normalize_base10(self) -> "Real":
        if self.kind is not RealKind.BINARY or self.base != 10:
            return self
        m, e = self.mantissa, self.exponent
        while abs(m) > _EPSILON and abs(m % 10.0) < _EPSILON:
            m /= 10.0
            e += 1
        return replace(self, mantissa=m, exponent=e)

    def is_infinite(self) -> bool:
        return self.kind in (RealKind.INFINITY, RealKind.NEG_INFINITY)

    def is_finite(self) -> bool:
        return self.kind in (RealKind.ZERO, RealKind.BINARY)

    def to_float(self) -> float:
        """The value as a float; may be infinite."""
        if self.kind is RealKind.BINARY:
            return self.mantissa * _powi(self.base, self.exponent)
        if self.kind is RealKind.ZERO:
            return 0.0
        if self.kind is RealKind.INFINITY:
            return math.inf
        return -math.inf

    def to_float32(self) -> float:
        """The value rounded to single precision."""
        value = self.to_float()
        try:
            return struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)

    def __float__(self) -> float:
        return self.to_float()

    @classmethod
    def from_any(cls, any: Any) -> "Real":
        any.tag.assert_eq(cls.TAG)
        any.header.assert_primitive()
        data = any.data
        if not data:
            return cls(RealKind.ZERO)
        first, rem = data[0], data[1:]
        if first & 0x80:
            return cls._decode_binary(any.tag, first, rem)
        if first & 0x40:
            if any.header.length != Length(1):
                raise InvalidLengthError()
            if first == 0x40:
                return cls(RealKind.INFINITY)
            if first == 0x41:
                return cls(RealKind.NEG_INFINITY)
            raise any.tag.invalid_value("Invalid float special value")
        return cls._decode_decimal(any.tag, first, rem)

    @classmethod
    def _decode_binary(cls, tag: Tag, first: int, rem: bytes) -> "Real":
        count = (first & 0x03) + 1
        if count >= len(rem):
            raise tag.invalid_value("Invalid float value(exponent)")
        raw_exponent, rem = rem[:count], rem[count:]
        exponent = int.from_bytes(raw_exponent, "big", signed=True)
        base_bits = (first >> 4) & 0x03
        if base_bits not in _ENC_BASES:
            raise tag.invalid_value("Illegal REAL encoding base")
        enc_base, multiplier = _ENC_BASES[base_bits]
        exponent *= multiplier
        if len(rem) > 8:
            raise tag.invalid_value("Mantissa too large (REAL)")
        mantissa = int.from_bytes(rem, "big")
        if mantissa > (1 << 63) - 1:
            mantissa -= 1 << 64
        if first & 0x40:
            mantissa = -mantissa
        scale = (first >> 2) & 0x03
        value = float(mantissa) * (2.0**scale if scale else 1.0)
        return cls(RealKind.BINARY, value, 2, exponent, enc_base)

    @classmethod
    def _decode_decimal(cls, tag: Tag, first: int, rem: bytes) -> "Real":
        try:
            text = rem.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Asn1Error("invalid UTF-8 in REAL value") from exc
        form = first & 0x03
        if form == 1:
            if not _NR1.fullmatch(text) or int(text) > 0xFFFF_FFFF:
                raise tag.invalid_value("Invalid float string encoding")
            return cls.from_float(float(int(text)))
        if form in (2, 3):
            if not text or _FORBIDDEN_IN_NUMBER.search(text):
                raise tag.invalid_value("Invalid float string encoding")
            try:
                value = float(text)
            except ValueError:
                raise tag.invalid_value("Invalid float string encoding") from None
            if math.isnan(value):
                raise tag.invalid_value("Invalid float string encoding")
            return cls.from_float(value)
        raise tag.invalid_value(f"Invalid NR ({form})")

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.assert_primitive()
        any.header.length.assert_definite()

    def der_content(self) -> bytes:
        if self.kind is RealKind.ZERO:
            return b""
        if self.kind is RealKind.INFINITY:
            return b"\x40"
        if self.kind is RealKind.NEG_INFINITY:
            return b"\x41"
        if self.base == 10:
            sign = "+" if self.exponent == 0 else ""
            return f"\x03{_float_text(self.mantissa)}E{sign}{self.exponent}".encode("ascii")
        if self.base != 2:
            raise self.TAG.invalid_value("Invalid base for REAL")
        return self._binary_content()

    def _binary_content(self) -> bytes:
        negative, m, enc_base, e = _drop_floating_point(self.mantissa, self.enc_base, self.exponent)
        if m == 0:
            raise self.TAG.invalid_value("Serialization of REAL failed")
        first = 0x80
        if negative:
            first |= 0x40
        if enc_base == 2:
            while not m & 0x1:
                m >>= 1
                e += 1
        elif enc_base == 8:
            while not m & 0x7:
                m >>= 3
                e += 1
            first |= 0x10
        else:
            while not m & 0xF:
                m >>= 4
                e += 1
            first |= 0x20
        scale = 0
        while not m & 0x1 and scale < 4:
            m >>= 1
            scale += 1
        first |= scale << 2
        magnitude = abs(e)
        if magnitude <= 0xFF:
            len_e = 1
        elif magnitude <= 0xFFFF:
            len_e = 2
        elif magnitude <= 0xFF_FFFF:
            len_e = 3
        else:
            len_e = 4
        first |= (len_e - 1) & 0x3
        out = bytearray([first & 0xFF])
        if len_e == 4:
            out.append(len_e)
        out += (e & 0xFFFF_FFFF).to_bytes(4, "big")[4 - len_e :]
        out += m.to_bytes(8, "big").lstrip(b"\x00")
        return bytes(out)


def float_from_any(any: Any) -> float:
    """Decode a REAL object into a float."""
    any.tag.assert_eq(Real.TAG)
    any.header.assert_primitive()
    return Real.from_any(any).to_float()


def float32_from_any(any: Any) -> float:
    """Decode a REAL object into a single-precision float."""
    any.tag.assert_eq(Real.TAG)
    any.header.assert_primitive()
    return Real.from_any(any).to_float32()