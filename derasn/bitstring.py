"""ASN.1 BIT STRING."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import (
    Any,
    Asn1Type,
    DerConstraint,
    DerConstraintError,
    InvalidLengthError,
    Tag,
)


def _trailing_zeros(octet: int) -> int:
    if octet == 0:
        return 8
    return (octet & -octet).bit_length() - 1


@dataclass(frozen=True)
class BitString(Asn1Type):
    """A BIT STRING: the count of unused bits in the last byte, and the bytes."""

    unused_bits: int
    data: bytes

    TAG: ClassVar[Tag] = Tag.BIT_STRING

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if not 0 <= self.unused_bits <= 0xFF:
            raise ValueError("unused bits must fit in one byte")

    def is_set(self, bitnum: int) -> bool:
        """Whether bit ``bitnum`` (most significant first) is set."""
        byte_pos, bit = divmod(bitnum, 8)
        if byte_pos >= len(self.data):
            return False
        return bool(self.data[byte_pos] & (1 << (7 - bit)))

    def __bytes__(self) -> bytes:
        return self.data

    @classmethod
    def from_any(cls, any: Any) -> "BitString":
        any.tag.assert_eq(cls.TAG)
        if not any.data:
            raise InvalidLengthError()
        return cls(any.data[0], any.data[1:])

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.assert_primitive()
        data = any.data
        if not data:
            raise InvalidLengthError()
        if len(data) == 1:
            if data[0] != 0:
                raise InvalidLengthError()
            return
        if _trailing_zeros(data[-1]) < data[0]:
            raise DerConstraintError(DerConstraint.UNUSED_BITS_NOT_ZERO)

    def der_content(self) -> bytes:
        return bytes([self.unused_bits]) + self.data