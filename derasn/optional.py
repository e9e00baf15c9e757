"""Optional values, CHOICE tag checks and the end-of-contents marker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from derasn.core import Any, Asn1Error, Header, InvalidLengthError, Tag


@dataclass(frozen=True)
class EndOfContent:
    """End-of-contents octets closing an indefinite-length BER object.

    This marker does not exist in DER, so it has no DER conversions.
    """

    TAG: ClassVar[Tag] = Tag.END_OF_CONTENT

    @classmethod
    def from_any(cls, any: Any) -> "EndOfContent":
        any.tag.assert_eq(cls.TAG)
        if not any.header.length.is_null():
            raise InvalidLengthError()
        return cls()


def can_decode(expected, tag: Tag) -> bool:
    """Whether ``tag`` can be decoded as the single alternative ``expected``."""
    return expected.TAG == tag


def _parse_optional(kind, data: bytes, der: bool):
    if not data:
        return data, None
    header_parser = Header.from_der if der else Header.from_ber
    try:
        _, header = header_parser(data)
    except Asn1Error:
        pass
    else:
        if header.tag != kind.TAG:
            return data, None
    return kind.from_der(data) if der else kind.from_ber(data)


def parse_optional_ber(kind, data: bytes):
    """Parse a BER value of ``kind`` if present; ``None`` when empty or differently tagged."""
    return _parse_optional(kind, data, der=False)


def parse_optional_der(kind, data: bytes):
    """Parse a DER value of ``kind`` if present; ``None`` when empty or differently tagged."""
    return _parse_optional(kind, data, der=True)


def parse_optional_any_ber(data: bytes) -> Tuple[bytes, Optional[Any]]:
    """Parse any BER object, or return ``None`` when the input is empty."""
    if not data:
        return data, None
    return Any.from_ber(data)


def parse_optional_any_der(data: bytes) -> Tuple[bytes, Optional[Any]]:
    """Parse any DER object, or return ``None`` when the input is empty."""
    if not data:
        return data, None
    return Any.from_der(data)