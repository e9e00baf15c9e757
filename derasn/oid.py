"""ASN.1 OBJECT IDENTIFIER and RELATIVE-OID."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Iterable, Iterator, Tuple

from derasn.core import Any, Asn1Type, Tag
from derasn.encode import encode_base128

_U64_LIMIT = 1 << 64
_COMPONENT = re.compile(r"\+?[0-9]+")


class OidParseError(ValueError):
    """An OID could not be built from components or text."""

    TOO_SHORT = "too short"
    FIRST_COMPONENTS_TOO_LARGE = "first components too large"
    PARSE_INT_ERROR = "invalid integer component"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"OID parse error: {reason}")


def _check_component(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _U64_LIMIT:
        raise OidParseError(OidParseError.PARSE_INT_ERROR)
    return value


def _encode_relative(components: Iterable[int]) -> bytes:
    return b"".join(encode_base128(value) for value in components)


@dataclass(frozen=True, repr=False)
class Oid(Asn1Type):
    """An object identifier in its encoded form, absolute or relative."""

    asn1: bytes
    relative: bool = False

    TAG: ClassVar[Tag] = Tag.OID

    def __post_init__(self) -> None:
        if not isinstance(self.asn1, bytes):
            object.__setattr__(self, "asn1", bytes(self.asn1))

    @classmethod
    def from_components(cls, components) -> "Oid":
        """Build an absolute OID from its arcs."""
        values = [_check_component(value) for value in components]
        if len(values) < 2:
            if values == [0]:
                return cls(b"\x00")
            raise OidParseError(OidParseError.TOO_SHORT)
        if values[0] >= 7 or values[1] >= 40:
            raise OidParseError(OidParseError.FIRST_COMPONENTS_TOO_LARGE)
        first = (values[0] * 40 + values[1]) & 0xFF
        return cls(bytes([first]) + _encode_relative(values[2:]))

    @classmethod
    def from_relative(cls, components) -> "Oid":
        """Build a relative OID from its arcs."""
        values = [_check_component(value) for value in components]
        if not values:
            raise OidParseError(OidParseError.TOO_SHORT)
        return cls(_encode_relative(values), relative=True)

    @classmethod
    def parse(cls, text: str) -> "Oid":
        """Parse a dotted string such as ``"1.2.840.113549.1.1.5"``."""
        values = []
        for part in text.split("."):
            if not _COMPONENT.fullmatch(part):
                raise OidParseError(OidParseError.PARSE_INT_ERROR)
            values.append(_check_component(int(part)))
        return cls.from_components(values)

    @classmethod
    def from_any(cls, any: Any) -> "Oid":
        return cls(any.data)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.assert_primitive()
        any.header.length.assert_definite()

    @classmethod
    def from_ber_relative(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rem, obj = Any.from_ber(data)
        obj.header.assert_primitive()
        obj.header.assert_tag(Tag.RELATIVE_OID)
        return rem, cls(obj.data, relative=True)

    @classmethod
    def from_der_relative(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rem, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.RELATIVE_OID)
        cls.check_constraints(obj)
        return rem, cls(obj.data, relative=True)

    def as_bytes(self) -> bytes:
        """The encoded OID, without header."""
        return self.asn1

    def _arc_bytes(self) -> bytes:
        if self.relative:
            return self.asn1
        return self.asn1[1:]

    def _fits_u64(self) -> bool:
        longest = current = 0
        for octet in self._arc_bytes():
            if octet >> 7:
                current += 7
            else:
                longest = max(longest, current + 7)
                current = 0
        return longest <= 64

    def arcs(self) -> Iterator[int]:
        """Iterate over the sub-identifiers (arcs)."""
        data = self.asn1
        pos = 0
        if not self.relative:
            if not data:
                return
            yield data[0] // 40
            if data == b"\x00":
                return
            yield data[0] % 40
            pos = 1
        while pos < len(data):
            value = 0
            for octet in data[pos:]:
                pos += 1
                value = (value << 7) | (octet & 0x7F)
                if not octet >> 7:
                    break
            yield value

    def to_id_string(self) -> str:
        """Dotted form of the arcs, or a hex dump when an arc does not fit in 64 bits."""
        if self._fits_u64():
            return ".".join(str(arc) for arc in self.arcs())
        return " ".join(f"{octet:02x}" for octet in self.asn1)

    def starts_with(self, needle: "Oid") -> bool:
        """Whether ``needle`` is a prefix of this OID."""
        return self.asn1.startswith(needle.as_bytes())

    def der_tag(self) -> Tag:
        return Tag.RELATIVE_OID if self.relative else Tag.OID

    def der_content(self) -> bytes:
        return self.asn1

    def __str__(self) -> str:
        prefix = "rel. " if self.relative else ""
        return prefix + self.to_id_string()

    def __repr__(self) -> str:
        return f"OID({self})"