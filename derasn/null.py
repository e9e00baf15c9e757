"""ASN.1 NULL."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import Any, Asn1Type, InvalidLengthError, Tag


@dataclass(frozen=True)
class Null(Asn1Type):
    """The NULL value."""

    TAG: ClassVar[Tag] = Tag.NULL

    @classmethod
    def from_any(cls, any: Any) -> "Null":
        any.tag.assert_eq(cls.TAG)
        if not any.header.length.is_null():
            raise InvalidLengthError()
        return cls()

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        """NULL has no DER rules beyond its length, which decoding checks."""

    def der_content(self) -> bytes:
        return b""