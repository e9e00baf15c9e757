"""ASN.1 INTEGER: arbitrary-size integers kept in their encoded form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

from derasn.core import (
    Any,
    Asn1Type,
    DerConstraint,
    DerConstraintError,
    IntegerNegativeError,
    IntegerTooLargeError,
    Tag,
)


def _byte_count(bits: int) -> int:
    if bits <= 0 or bits % 8:
        raise ValueError("bit width must be a positive multiple of 8")
    return bits // 8


def _is_highest_bit_set(data: bytes) -> bool:
    return bool(data) and bool(data[0] & 0x80)


def trim_slice(data: bytes) -> bytes:
    """Strip redundant leading 0x00 (positive) or 0xff (negative) bytes, keeping at least one."""
    data = bytes(data)
    if not data or data[0] not in (0x00, 0xFF):
        return data

    first_nonzero = next((pos for pos, byte in enumerate(data) if byte != 0), None)
    if first_nonzero is None:
        return data[-1:]
    if first_nonzero > 0:
        return data[first_nonzero:]

    first_significant = next(
        (
            pos
            for pos, (a, b) in enumerate(zip(data, data[1:]))
            if not (a == 0xFF and b >= 0x80)
        ),
        None,
    )
    if first_significant is None:
        return data[-1:]
    if first_significant > 0:
        return data[first_significant:]
    return data


def _unsigned_value(data: bytes, size: int) -> int:
    if _is_highest_bit_set(data):
        raise IntegerNegativeError()
    trimmed = trim_slice(data)
    if len(trimmed) > size:
        raise IntegerTooLargeError()
    return int.from_bytes(trimmed, "big")


def decode_unsigned(any: Any, bits: int) -> int:
    """Decode an INTEGER object into an unsigned value of ``bits`` bits."""
    size = _byte_count(bits)
    any.tag.assert_eq(Tag.INTEGER)
    any.header.assert_primitive()
    return _unsigned_value(any.data, size)


def decode_signed(any: Any, bits: int) -> int:
    """Decode an INTEGER object into a signed value of ``bits`` bits."""
    size = _byte_count(bits)
    any.tag.assert_eq(Tag.INTEGER)
    any.header.assert_primitive()
    data = any.data
    if _is_highest_bit_set(data):
        if len(data) > size:
            raise IntegerTooLargeError()
        return int.from_bytes(data, "big", signed=True)
    value = _unsigned_value(data, size)
    if value > (1 << (bits - 1)) - 1:
        raise IntegerTooLargeError()
    return value


def check_der_int_constraints(any: Any) -> None:
    """Check that an INTEGER uses the minimal DER encoding."""
    any.header.assert_primitive()
    any.header.length.assert_definite()
    data = any.as_bytes()
    if not data:
        raise DerConstraintError(DerConstraint.INTEGER_EMPTY)
    if len(data) >= 2:
        if data[0] == 0x00 and data[1] < 0x80:
            raise DerConstraintError(DerConstraint.INTEGER_LEADING_ZEROES)
        if data[0] == 0xFF and data[1] >= 0x80:
            raise DerConstraintError(DerConstraint.INTEGER_LEADING_FF)


def parse_der_unsigned(data: bytes, bits: int) -> Tuple[bytes, int]:
    """Parse a DER INTEGER as an unsigned value of ``bits`` bits."""
    rem, obj = Any.from_der(data)
    check_der_int_constraints(obj)
    return rem, decode_unsigned(obj, bits)


def parse_der_signed(data: bytes, bits: int) -> Tuple[bytes, int]:
    """Parse a DER INTEGER as a signed value of ``bits`` bits."""
    rem, obj = Any.from_der(data)
    check_der_int_constraints(obj)
    return rem, decode_signed(obj, bits)


def encode_der_int(value: int) -> bytes:
    """Encode a Python integer as a complete DER INTEGER."""
    return Integer.from_int(value).to_der()


@dataclass(frozen=True)
class Integer(Asn1Type):
    """An INTEGER of any size, stored as its big-endian two's complement content."""

    data: bytes

    TAG: ClassVar[Tag] = Tag.INTEGER

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_int(cls, value: int) -> "Integer":
        """Build the minimal encoding of ``value``."""
        magnitude = value if value >= 0 else ~value
        size = (magnitude.bit_length() + 8) // 8
        return cls(value.to_bytes(size, "big", signed=True))

    @classmethod
    def from_any(cls, any: Any) -> "Integer":
        any.tag.assert_eq(cls.TAG)
        return cls(any.data)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        check_der_int_constraints(any)

    def any(self) -> Any:
        """A universal object holding this integer's content."""
        return Any.from_tag_and_data(self.TAG, self.data)

    def as_unsigned(self, bits: int) -> int:
        """The value as an unsigned integer of ``bits`` bits."""
        return decode_unsigned(self.any(), bits)

    def as_signed(self, bits: int) -> int:
        """The value as a signed integer of ``bits`` bits."""
        return decode_signed(self.any(), bits)

    def as_bigint(self) -> int:
        """The signed value, of any size."""
        return int.from_bytes(self.data, "big", signed=True)

    def as_biguint(self) -> int:
        """The unsigned value, of any size; negative values raise."""
        if _is_highest_bit_set(self.data):
            raise IntegerNegativeError()
        return int.from_bytes(self.data, "big")

    def __int__(self) -> int:
        return self.as_bigint()

    def __bytes__(self) -> bytes:
        return self.data

    def der_content(self) -> bytes:
        return self.data