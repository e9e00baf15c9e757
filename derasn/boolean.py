"""ASN.1 BOOLEAN."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import (
    Any,
    Asn1Type,
    DerConstraint,
    DerConstraintError,
    InvalidLengthError,
    Length,
    Tag,
)


@dataclass(frozen=True)
class Boolean(Asn1Type):
    """A BOOLEAN holding its raw content octet.

    BER treats any non-zero octet as true; DER allows only 0x00 and 0xff.
    """

    value: int

    TAG: ClassVar[Tag] = Tag.BOOLEAN
    FALSE: ClassVar["Boolean"]
    TRUE: ClassVar["Boolean"]

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError("boolean octet must be between 0 and 255")

    @classmethod
    def from_bool(cls, value: bool) -> "Boolean":
        return cls(0xFF if value else 0x00)

    def __bool__(self) -> bool:
        return self.value != 0

    @classmethod
    def from_any(cls, any: Any) -> "Boolean":
        any.tag.assert_eq(cls.TAG)
        if any.header.length != Length(1):
            raise InvalidLengthError()
        return cls(any.data[0])

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        if not any.data:
            raise InvalidLengthError()
        if any.data[0] not in (0x00, 0xFF):
            raise DerConstraintError(DerConstraint.INVALID_BOOLEAN)

    def der_content(self) -> bytes:
        return b"\xff" if self.value else b"\x00"

    def to_der_raw(self) -> bytes:
        """Encode keeping the stored octet as is."""
        return bytes([self.TAG.value, 0x01, self.value])


Boolean.FALSE = Boolean(0x00)
Boolean.TRUE = Boolean(0xFF)


def bool_from_any(any: Any) -> bool:
    """Decode a BOOLEAN object into a Python bool."""
    any.tag.assert_eq(Boolean.TAG)
    return bool(Boolean.from_any(any))