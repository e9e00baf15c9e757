"""ASN.1 ENUMERATED."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import Any, Asn1Type, IntegerTooLargeError, Tag
from derasn.integer import Integer

_U32_MAX = 0xFFFF_FFFF


def _bytes_to_u64(data: bytes) -> int:
    value = 0
    for octet in data:
        if value & 0xFF00_0000_0000_0000:
            raise IntegerTooLargeError()
        value = (value << 8) | octet
    return value


@dataclass(frozen=True, order=True)
class Enumerated(Asn1Type):
    """An ENUMERATED value, limited to 0 .. 2**32 - 1."""

    value: int

    TAG: ClassVar[Tag] = Tag.ENUMERATED

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _U32_MAX:
            raise ValueError("enumerated value must be between 0 and 2**32 - 1")

    def __int__(self) -> int:
        return self.value

    @classmethod
    def from_any(cls, any: Any) -> "Enumerated":
        any.tag.assert_eq(cls.TAG)
        any.header.assert_primitive()
        value = _bytes_to_u64(any.data)
        if value > _U32_MAX:
            raise IntegerTooLargeError()
        return cls(value)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.length.assert_definite()

    def der_content(self) -> bytes:
        return Integer.from_int(self.value).der_content()