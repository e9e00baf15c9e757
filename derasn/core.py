"""Core ASN.1 building blocks: errors, classes, tags, lengths, headers and generic objects."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Callable, ClassVar, Optional, Tuple, TypeVar, Union

MAX_RECURSION = 50

T = TypeVar("T")


class Asn1Error(ValueError):
    """Base class for all ASN.1 decoding and encoding errors."""


class UnexpectedTagError(Asn1Error):
    """The object does not carry the expected tag."""

    def __init__(self, expected: Optional["Tag"], actual: "Tag") -> None:
        self.expected = expected
        self.actual = actual
        wanted = "any" if expected is None else str(expected)
        super().__init__(f"unexpected tag: expected {wanted}, got {actual}")


class UnexpectedClassError(Asn1Error):
    """The object does not carry the expected class."""

    def __init__(self, expected: Optional["Class"], actual: "Class") -> None:
        self.expected = expected
        self.actual = actual
        wanted = "any" if expected is None else str(expected)
        super().__init__(f"unexpected class: expected {wanted}, got {actual}")


class InvalidLengthError(Asn1Error):
    """The length of an object is invalid for its type or encoding."""

    def __init__(self, message: str = "invalid length") -> None:
        super().__init__(message)


class InvalidValueError(Asn1Error):
    """The content of an object is invalid for its tag."""

    def __init__(self, tag: "Tag", message: str) -> None:
        self.tag = tag
        self.message = message
        super().__init__(f"invalid value for {tag}: {message}")


class IncompleteError(Asn1Error):
    """The input ended before the object was complete."""

    def __init__(self, needed: Optional[int] = None) -> None:
        self.needed = needed
        detail = "unknown" if needed is None else str(needed)
        super().__init__(f"incomplete input: {detail} more byte(s) needed")


class ConstructUnexpectedError(Asn1Error):
    """A primitive encoding was expected, but the object is constructed."""

    def __init__(self) -> None:
        super().__init__("constructed encoding unexpected")


class IntegerTooLargeError(Asn1Error):
    """The integer does not fit into the requested type."""

    def __init__(self) -> None:
        super().__init__("integer too large")


class IntegerNegativeError(Asn1Error):
    """The integer is negative, but an unsigned value was requested."""

    def __init__(self) -> None:
        super().__init__("integer is negative")


class StringInvalidCharsetError(Asn1Error):
    """The string contains characters outside of its allowed character set."""

    def __init__(self) -> None:
        super().__init__("string contains invalid characters")


class DerConstraint(enum.Enum):
    """Rules of the distinguished encoding that an object may break."""

    INDEFINITE_LENGTH = "indefinite length"
    CONSTRUCTED = "constructed object"
    NOT_CONSTRUCTED = "object not constructed"
    LONG_LENGTH = "long form used for a short length"
    MISSING_TIME_ZONE = "missing time zone"
    MISSING_SECONDS = "missing seconds"
    UNUSED_BITS_NOT_ZERO = "unused bits not zero"
    INVALID_BOOLEAN = "invalid boolean value"
    INTEGER_EMPTY = "empty integer"
    INTEGER_LEADING_ZEROES = "integer with leading zeroes"
    INTEGER_LEADING_FF = "negative integer with leading 0xff"


class DerConstraintError(Asn1Error):
    """A DER constraint was violated."""

    def __init__(self, constraint: DerConstraint) -> None:
        self.constraint = constraint
        super().__init__(f"DER constraint failed: {constraint.value}")


class Class(enum.IntEnum):
    """The class of an ASN.1 tag."""

    UNIVERSAL = 0
    APPLICATION = 1
    CONTEXT_SPECIFIC = 2
    PRIVATE = 3

    def assert_eq(self, other: "Class") -> None:
        """Raise UnexpectedClassError unless this class is ``other``."""
        if self != other:
            raise UnexpectedClassError(other, self)

    def __str__(self) -> str:
        return self.name.replace("_", "-")


@dataclass(frozen=True, order=True)
class Tag:
    """An ASN.1 tag number."""

    value: int

    END_OF_CONTENT: ClassVar[Tag]
    BOOLEAN: ClassVar[Tag]
    INTEGER: ClassVar[Tag]
    BIT_STRING: ClassVar[Tag]
    OCTET_STRING: ClassVar[Tag]
    NULL: ClassVar[Tag]
    OID: ClassVar[Tag]
    OBJECT_DESCRIPTOR: ClassVar[Tag]
    EXTERNAL: ClassVar[Tag]
    REAL_TYPE: ClassVar[Tag]
    ENUMERATED: ClassVar[Tag]
    EMBEDDED_PDV: ClassVar[Tag]
    UTF8_STRING: ClassVar[Tag]
    RELATIVE_OID: ClassVar[Tag]
    SEQUENCE: ClassVar[Tag]
    SET: ClassVar[Tag]
    NUMERIC_STRING: ClassVar[Tag]
    PRINTABLE_STRING: ClassVar[Tag]
    TELETEX_STRING: ClassVar[Tag]
    VIDEOTEX_STRING: ClassVar[Tag]
    IA5_STRING: ClassVar[Tag]
    UTC_TIME: ClassVar[Tag]
    GENERALIZED_TIME: ClassVar[Tag]
    GRAPHIC_STRING: ClassVar[Tag]
    VISIBLE_STRING: ClassVar[Tag]
    GENERAL_STRING: ClassVar[Tag]
    UNIVERSAL_STRING: ClassVar[Tag]
    BMP_STRING: ClassVar[Tag]

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("tag number must not be negative")

    def assert_eq(self, other: "Tag") -> None:
        """Raise UnexpectedTagError unless this tag equals ``other``."""
        if self != other:
            raise UnexpectedTagError(other, self)

    def invalid_value(self, message: str) -> InvalidValueError:
        """Build (not raise) an error describing an invalid value for this tag."""
        return InvalidValueError(self, message)

    def __str__(self) -> str:
        return _TAG_NAMES.get(self.value, f"Tag({self.value})")


Tag.END_OF_CONTENT = Tag(0)
Tag.BOOLEAN = Tag(1)
Tag.INTEGER = Tag(2)
Tag.BIT_STRING = Tag(3)
Tag.OCTET_STRING = Tag(4)
Tag.NULL = Tag(5)
Tag.OID = Tag(6)
Tag.OBJECT_DESCRIPTOR = Tag(7)
Tag.EXTERNAL = Tag(8)
Tag.REAL_TYPE = Tag(9)
Tag.ENUMERATED = Tag(10)
Tag.EMBEDDED_PDV = Tag(11)
Tag.UTF8_STRING = Tag(12)
Tag.RELATIVE_OID = Tag(13)
Tag.SEQUENCE = Tag(16)
Tag.SET = Tag(17)
Tag.NUMERIC_STRING = Tag(18)
Tag.PRINTABLE_STRING = Tag(19)
Tag.TELETEX_STRING = Tag(20)
Tag.VIDEOTEX_STRING = Tag(21)
Tag.IA5_STRING = Tag(22)
Tag.UTC_TIME = Tag(23)
Tag.GENERALIZED_TIME = Tag(24)
Tag.GRAPHIC_STRING = Tag(25)
Tag.VISIBLE_STRING = Tag(26)
Tag.GENERAL_STRING = Tag(27)
Tag.UNIVERSAL_STRING = Tag(28)
Tag.BMP_STRING = Tag(30)

_TAG_NAMES = {
    0: "EndOfContent",
    1: "Boolean",
    2: "Integer",
    3: "BitString",
    4: "OctetString",
    5: "Null",
    6: "Oid",
    7: "ObjectDescriptor",
    8: "External",
    9: "RealType",
    10: "Enumerated",
    11: "EmbeddedPdv",
    12: "Utf8String",
    13: "RelativeOid",
    16: "Sequence",
    17: "Set",
    18: "NumericString",
    19: "PrintableString",
    20: "TeletexString",
    21: "VideotexString",
    22: "Ia5String",
    23: "UtcTime",
    24: "GeneralizedTime",
    25: "GraphicString",
    26: "VisibleString",
    27: "GeneralString",
    28: "UniversalString",
    30: "BmpString",
}


@dataclass(frozen=True)
class Length:
    """Length of an object: a byte count, or ``None`` for the indefinite form."""

    value: Optional[int]

    INDEFINITE: ClassVar[Length]

    def __post_init__(self) -> None:
        if self.value is not None and self.value < 0:
            raise ValueError("length must not be negative")

    def is_definite(self) -> bool:
        return self.value is not None

    def assert_definite(self) -> None:
        """Raise InvalidLengthError if the length is indefinite."""
        if self.value is None:
            raise InvalidLengthError("indefinite length unexpected")

    def is_null(self) -> bool:
        """True for a definite length of zero."""
        return self.value == 0

    def to_der(self) -> bytes:
        """Encode the length using the shortest definite form."""
        if self.value is None:
            raise DerConstraintError(DerConstraint.INDEFINITE_LENGTH)
        if self.value < 0x80:
            return bytes([self.value])
        body = self.value.to_bytes((self.value.bit_length() + 7) // 8, "big")
        if len(body) > 126:
            raise InvalidLengthError("length too large")
        return bytes([0x80 | len(body)]) + body

    def to_der_len(self) -> int:
        return len(self.to_der())

    def __str__(self) -> str:
        return "Indefinite" if self.value is None else str(self.value)


Length.INDEFINITE = Length(None)


def _take(data: bytes, count: int) -> Tuple[bytes, bytes]:
    """Split ``count`` bytes off the front of ``data``."""
    if len(data) < count:
        raise IncompleteError(count - len(data))
    return data[count:], data[:count]


def _base128(value: int) -> bytes:
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append(0x80 | (value & 0x7F))
        value >>= 7
    return bytes(reversed(groups))


def _parse_identifier(data: bytes) -> Tuple[bytes, Class, bool, int, bytes]:
    if not data:
        raise IncompleteError(1)
    first = data[0]
    klass = Class(first >> 6)
    constructed = bool(first & 0x20)
    number = first & 0x1F
    if number != 0x1F:
        return data[1:], klass, constructed, number, data[:1]
    number = 0
    for pos, octet in enumerate(data[1:], start=1):
        number = (number << 7) | (octet & 0x7F)
        if number > 0xFFFF_FFFF:
            raise Asn1Error("invalid tag: tag number too large")
        if not octet & 0x80:
            return data[pos + 1 :], klass, constructed, number, data[: pos + 1]
    raise IncompleteError(1)


def _parse_length(data: bytes, der: bool) -> Tuple[bytes, Length]:
    if not data:
        raise IncompleteError(1)
    first, rest = data[0], data[1:]
    if first < 0x80:
        return rest, Length(first)
    count = first & 0x7F
    if count == 0:
        if der:
            raise DerConstraintError(DerConstraint.INDEFINITE_LENGTH)
        return rest, Length.INDEFINITE
    if count == 0x7F:
        raise InvalidLengthError("reserved length encoding")
    rest, raw = _take(rest, count)
    value = int.from_bytes(raw, "big")
    if value > 0xFFFF_FFFF_FFFF_FFFF:
        raise InvalidLengthError("length too large")
    if der and value < 0x80:
        raise DerConstraintError(DerConstraint.LONG_LENGTH)
    return rest, Length(value)


def _encode_identifier(klass: Class, constructed: bool, tag: Tag) -> bytes:
    first = (int(klass) << 6) | (0x20 if constructed else 0)
    if tag.value < 0x1F:
        return bytes([first | tag.value])
    return bytes([first | 0x1F]) + _base128(tag.value)


@dataclass(frozen=True)
class Header:
    """Identifier and length of an encoded object."""

    klass: Class
    constructed: bool
    tag: Tag
    length: Length
    raw_tag: Optional[bytes] = field(default=None, compare=False)

    @classmethod
    def new_simple(cls, tag: Tag) -> "Header":
        """A universal, primitive header with a zero length."""
        return cls(Class.UNIVERSAL, False, tag, Length(0))

    @classmethod
    def _parse(cls, data: bytes, der: bool) -> Tuple[bytes, "Header"]:
        data = bytes(data)
        rem, klass, constructed, number, raw = _parse_identifier(data)
        rem, length = _parse_length(rem, der)
        return rem, cls(klass, constructed, Tag(number), length, raw)

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Header"]:
        """Parse a BER header, returning the remaining bytes and the header."""
        return cls._parse(data, der=False)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Header"]:
        """Parse a DER header, returning the remaining bytes and the header."""
        return cls._parse(data, der=True)

    def with_class(self, klass: Class) -> "Header":
        return replace(self, klass=klass, raw_tag=None)

    def with_tag(self, tag: Tag) -> "Header":
        return replace(self, tag=tag, raw_tag=None)

    def assert_primitive(self) -> None:
        if self.constructed:
            raise ConstructUnexpectedError()

    def assert_constructed(self) -> None:
        if not self.constructed:
            raise Asn1Error("constructed encoding expected")

    def assert_tag(self, tag: Tag) -> None:
        self.tag.assert_eq(tag)

    def assert_definite(self) -> None:
        self.length.assert_definite()

    def to_der(self) -> bytes:
        identifier = self.raw_tag or _encode_identifier(self.klass, self.constructed, self.tag)
        return identifier + self.length.to_der()

    def to_der_len(self) -> int:
        return len(self.to_der())


def _ber_skip(data: bytes, header: Header, depth: int) -> Tuple[bytes, bool]:
    """Skip the content of an object; the flag tells whether it was end-of-content."""
    if depth == 0:
        raise Asn1Error("maximum recursion depth exceeded")
    if header.length.value is not None:
        if header.length.value == 0 and header.tag == Tag.END_OF_CONTENT:
            return data, True
        rem, _ = _take(data, header.length.value)
        return rem, False
    header.assert_constructed()
    while True:
        data, inner = Header.from_ber(data)
        data, end = _ber_skip(data, inner, depth - 1)
        if end:
            return data, False


def _ber_object_content(data: bytes, header: Header, depth: int) -> Tuple[bytes, bytes]:
    rem, _ = _ber_skip(data, header, depth)
    content = data[: len(data) - len(rem)]
    if not header.length.is_definite():
        content = content[:-2]
    return rem, content


def _der_object_content(data: bytes, header: Header) -> Tuple[bytes, bytes]:
    header.assert_definite()
    return _take(data, header.length.value or 0)


def _as_tag(tag: Union[Tag, int]) -> Tag:
    return tag if isinstance(tag, Tag) else Tag(tag)


@dataclass(frozen=True)
class Any:
    """A generic encoded object: a header and the raw content bytes."""

    header: Header
    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_tag_and_data(cls, tag: Tag, data: bytes) -> "Any":
        """A universal object; SEQUENCE and SET are marked constructed."""
        constructed = tag in (Tag.SEQUENCE, Tag.SET)
        return cls(Header(Class.UNIVERSAL, constructed, tag, Length(len(data))), data)

    @property
    def klass(self) -> Class:
        return self.header.klass

    @property
    def tag(self) -> Tag:
        return self.header.tag

    def with_class(self, klass: Class) -> "Any":
        return Any(self.header.with_class(klass), self.data)

    def with_tag(self, tag: Tag) -> "Any":
        return Any(self.header.with_tag(tag), self.data)

    def as_bytes(self) -> bytes:
        """The content bytes, without the header."""
        return self.data

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Any"]:
        rem, header = Header.from_ber(data)
        rem, content = _ber_object_content(rem, header, MAX_RECURSION)
        return rem, cls(header, content)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Any"]:
        rem, header = Header.from_der(data)
        header.length.assert_definite()
        rem, content = _der_object_content(rem, header)
        return rem, cls(header, content)

    @classmethod
    def from_ber_and_then(
        cls,
        klass: Class,
        tag: Union[Tag, int],
        data: bytes,
        op: Callable[[bytes], Tuple[bytes, T]],
    ) -> Tuple[bytes, T]:
        """Parse a BER object of the given class and tag and apply ``op`` to its content."""
        rem, obj = cls.from_ber(data)
        obj.tag.assert_eq(_as_tag(tag))
        obj.klass.assert_eq(klass)
        _, value = op(obj.data)
        return rem, value

    @classmethod
    def from_der_and_then(
        cls,
        klass: Class,
        tag: Union[Tag, int],
        data: bytes,
        op: Callable[[bytes], Tuple[bytes, T]],
    ) -> Tuple[bytes, T]:
        """Parse a DER object of the given class and tag and apply ``op`` to its content."""
        rem, obj = cls.from_der(data)
        obj.tag.assert_eq(_as_tag(tag))
        obj.klass.assert_eq(klass)
        _, value = op(obj.data)
        return rem, value

    @classmethod
    def parse_ber_content(cls, data: bytes, header: Header) -> Tuple[bytes, bytes]:
        """Take the content following a BER header from ``data``."""
        return _ber_object_content(bytes(data), header, MAX_RECURSION)

    @classmethod
    def parse_der_content(cls, data: bytes, header: Header) -> Tuple[bytes, bytes]:
        """Take the content following a DER header from ``data``."""
        return _der_object_content(bytes(data), header)

    def parse_ber(self, parser):
        """Parse the content with a type's ``from_ber`` or with a parsing callable."""
        return getattr(parser, "from_ber", parser)(self.data)

    def parse_der(self, parser):
        """Parse the content with a type's ``from_der`` or with a parsing callable."""
        return getattr(parser, "from_der", parser)(self.data)

    def check_constraints(self) -> None:
        self.header.length.assert_definite()

    def to_der(self) -> bytes:
        """Encode with a header whose length is computed from the content."""
        header = Header(self.header.klass, self.header.constructed, self.header.tag, Length(len(self.data)))
        return header.to_der() + self.data

    def to_der_raw(self) -> bytes:
        """Encode with the header as stored, without recomputing the length."""
        return self.header.to_der() + self.data

    def to_der_len(self) -> int:
        return len(self.to_der())


class Asn1Type(ABC):
    """Base for concrete ASN.1 types decoded from and encoded to a universal object."""

    TAG: ClassVar[Tag]
    CONSTRUCTED: ClassVar[bool] = False

    @classmethod
    @abstractmethod
    def from_any(cls, any: Any):
        """Build a value from a decoded generic object."""

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        """Check the DER rules for this type."""
        any.header.assert_definite()

    @classmethod
    def from_ber(cls, data: bytes):
        rem, obj = Any.from_ber(data)
        return rem, cls.from_any(obj)

    @classmethod
    def from_der(cls, data: bytes):
        rem, obj = Any.from_der(data)
        cls.check_constraints(obj)
        return rem, cls.from_any(obj)

    @abstractmethod
    def der_content(self) -> bytes:
        """The DER content bytes of this value."""

    def der_tag(self) -> Tag:
        return type(self).TAG

    def to_der(self) -> bytes:
        content = self.der_content()
        header = Header(Class.UNIVERSAL, self.CONSTRUCTED, self.der_tag(), Length(len(content)))
        return header.to_der() + content

    def to_der_len(self) -> int:
        return len(self.to_der())