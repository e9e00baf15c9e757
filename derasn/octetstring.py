"""ASN.1 OCTET STRING."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import Any, Asn1Type, Tag


@dataclass(frozen=True)
class OctetString(Asn1Type):
    """An OCTET STRING holding raw bytes."""

    data: bytes

    TAG: ClassVar[Tag] = Tag.OCTET_STRING

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    @classmethod
    def from_any(cls, any: Any) -> "OctetString":
        any.tag.assert_eq(cls.TAG)
        return cls(any.data)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.assert_primitive()

    def der_content(self) -> bytes:
        return self.data