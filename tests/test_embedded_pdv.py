import pytest

from derasn.core import (
    Any,
    Asn1Error,
    Class,
    Header,
    InvalidLengthError,
    InvalidValueError,
    Length,
    Tag,
    UnexpectedClassError,
    UnexpectedTagError,
)
from derasn.embedded_pdv import EmbeddedPdv, PdvIdentification, PdvKind
from derasn.integer import Integer
from derasn.oid import Oid


def _tlv(first: int, content: bytes) -> bytes:
    return bytes([first, len(content)]) + content


def _pdv(identification: bytes, value: bytes = b"\x01\x02\x03") -> Any:
    content = _tlv(0xA0, identification) + _tlv(0x82, value)
    return Any.from_tag_and_data(Tag.EMBEDDED_PDV, content)


def test_fixed():
    pdv = EmbeddedPdv.from_any(_pdv(_tlv(0x85, b"")))
    assert pdv.identification == PdvIdentification(PdvKind.FIXED)
    assert pdv.data_value == b"\x01\x02\x03"
    assert pdv.data_value_descriptor is None


def test_syntax():
    pdv = EmbeddedPdv.from_any(_pdv(_tlv(0x81, b"\x2a\x86\x48")))
    assert pdv.identification.kind is PdvKind.SYNTAX
    assert pdv.identification.syntax == Oid(b"\x2a\x86\x48")
    assert str(pdv.identification.syntax) == "1.2.840"


def test_syntaxes():
    inner = _tlv(0xA0, _tlv(0x06, b"\x2a") + _tlv(0x06, b"\x2b\x06"))
    pdv = EmbeddedPdv.from_any(_pdv(inner, b"xyz"))
    ident = pdv.identification
    assert ident.kind is PdvKind.SYNTAXES
    assert ident.abstract_syntax == Oid(b"\x2a")
    assert ident.transfer_syntax == Oid(b"\x2b\x06")
    assert pdv.data_value == b"xyz"


def test_presentation_context_id():
    pdv = EmbeddedPdv.from_any(_pdv(_tlv(0x82, b"\x07")))
    assert pdv.identification.kind is PdvKind.PRESENTATION_CONTEXT_ID
    assert pdv.identification.presentation_context_id == Integer(b"\x07")


def test_context_negotiation():
    inner = _tlv(0xA3, _tlv(0x02, b"\x05") + _tlv(0x06, b"\x2a"))
    pdv = EmbeddedPdv.from_any(_pdv(inner))
    ident = pdv.identification
    assert ident.kind is PdvKind.CONTEXT_NEGOTIATION
    assert ident.presentation_context_id == Integer(b"\x05")
    assert ident.transfer_syntax == Oid(b"\x2a")


def test_transfer_syntax():
    pdv = EmbeddedPdv.from_any(_pdv(_tlv(0x84, b"\x2a")))
    assert pdv.identification == PdvIdentification(PdvKind.TRANSFER_SYNTAX, transfer_syntax=Oid(b"\x2a"))


def test_invalid_identification_tag():
    with pytest.raises(InvalidValueError):
        EmbeddedPdv.from_any(_pdv(_tlv(0x86, b"")))


def test_wrong_outer_tag():
    content = _tlv(0xA1, _tlv(0x85, b"")) + _tlv(0x82, b"\x01")
    with pytest.raises(UnexpectedTagError):
        EmbeddedPdv.from_any(Any.from_tag_and_data(Tag.EMBEDDED_PDV, content))


def test_data_value_wrong_class():
    content = _tlv(0xA0, _tlv(0x85, b"")) + _tlv(0x02, b"\x01")
    with pytest.raises(UnexpectedClassError):
        EmbeddedPdv.from_any(Any.from_tag_and_data(Tag.EMBEDDED_PDV, content))


def test_check_constraints():
    constructed = Any(Header(Class.UNIVERSAL, True, Tag.EMBEDDED_PDV, Length(0)), b"")
    assert EmbeddedPdv.check_constraints(constructed) is None
    primitive = Any(Header(Class.UNIVERSAL, False, Tag.EMBEDDED_PDV, Length(0)), b"")
    with pytest.raises(Asn1Error):
        EmbeddedPdv.check_constraints(primitive)
    indefinite = Any(Header(Class.UNIVERSAL, True, Tag.EMBEDDED_PDV, Length.INDEFINITE), b"")
    with pytest.raises(InvalidLengthError):
        EmbeddedPdv.check_constraints(indefinite)