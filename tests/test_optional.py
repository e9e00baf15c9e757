from dataclasses import dataclass
from typing import ClassVar

import pytest

from derasn.core import (
    Any,
    Asn1Type,
    Class,
    DerConstraintError,
    Header,
    InvalidLengthError,
    Length,
    Tag,
    UnexpectedTagError,
)
from derasn.optional import (
    EndOfContent,
    can_decode,
    parse_optional_any_ber,
    parse_optional_any_der,
    parse_optional_ber,
    parse_optional_der,
)


@dataclass(frozen=True)
class _Octets(Asn1Type):
    TAG: ClassVar[Tag] = Tag.OCTET_STRING
    value: bytes

    @classmethod
    def from_any(cls, any):
        any.tag.assert_eq(cls.TAG)
        return cls(any.data)

    def der_content(self):
        return self.value


@pytest.mark.parametrize("parse", [parse_optional_ber, parse_optional_der])
def test_empty_input_gives_none(parse):
    assert parse(_Octets, b"") == (b"", None)


@pytest.mark.parametrize("parse", [parse_optional_ber, parse_optional_der])
def test_other_tag_gives_none_and_keeps_input(parse):
    data = b"\x02\x01\x01"
    rem, value = parse(_Octets, data)
    assert value is None
    assert rem == data


@pytest.mark.parametrize("parse", [parse_optional_ber, parse_optional_der])
def test_present_value_is_parsed(parse):
    encoded = _Octets(b"\xaa").to_der()
    trailer = b"\x05\x00"
    rem, value = parse(_Octets, encoded + trailer)
    assert rem == trailer
    assert value == _Octets(b"\xaa")


def test_der_optional_reports_malformed_header():
    with pytest.raises(DerConstraintError):
        parse_optional_der(_Octets, b"\x04\x81\x01\xaa")
    rem, value = parse_optional_ber(_Octets, b"\x04\x81\x01\xaa")
    assert value == _Octets(b"\xaa")
    assert rem == b""


@pytest.mark.parametrize("parse", [parse_optional_any_ber, parse_optional_any_der])
def test_optional_any(parse):
    assert parse(b"") == (b"", None)
    data = b"\x02\x01\x01"
    rem, obj = parse(data + b"\x05\x00")
    assert rem == b"\x05\x00"
    assert obj.to_der() == data


def test_can_decode():
    assert can_decode(_Octets, Tag.OCTET_STRING)
    assert not can_decode(_Octets, Tag.INTEGER)
    assert can_decode(EndOfContent, Tag.END_OF_CONTENT)


def test_end_of_content_from_any():
    _, obj = Any.from_ber(b"\x00\x00")
    assert EndOfContent.from_any(obj) == EndOfContent()


def test_end_of_content_wrong_tag():
    _, obj = Any.from_ber(b"\x05\x00")
    with pytest.raises(UnexpectedTagError):
        EndOfContent.from_any(obj)


def test_end_of_content_non_null_length():
    header = Header(Class.UNIVERSAL, False, Tag.END_OF_CONTENT, Length(1))
    with pytest.raises(InvalidLengthError):
        EndOfContent.from_any(Any(header, b"\x00"))