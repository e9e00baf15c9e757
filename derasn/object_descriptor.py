"""ASN.1 ObjectDescriptor: a GraphicString restricted to ASCII."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from derasn.core import Any, Asn1Type, StringInvalidCharsetError, Tag


@dataclass(frozen=True)
class ObjectDescriptor(Asn1Type):
    """An ObjectDescriptor string (``[UNIVERSAL 7] IMPLICIT GraphicString``)."""

    value: str

    TAG: ClassVar[Tag] = Tag.OBJECT_DESCRIPTOR

    def __post_init__(self) -> None:
        if not self.value.isascii():
            raise StringInvalidCharsetError()

    @classmethod
    def test_valid_charset(cls, data: bytes) -> None:
        """Raise StringInvalidCharsetError unless every byte is ASCII."""
        if not all(octet < 0x80 for octet in data):
            raise StringInvalidCharsetError()

    @classmethod
    def from_any(cls, any: Any) -> "ObjectDescriptor":
        any.tag.assert_eq(cls.TAG)
        cls.test_valid_charset(any.data)
        return cls(any.data.decode("ascii"))

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.assert_primitive()
        any.header.length.assert_definite()

    def __str__(self) -> str:
        return self.value

    def der_content(self) -> bytes:
        return self.value.encode("ascii")