"""ASN.1 EMBEDDED PDV."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from derasn.core import Any, Class, Tag
from derasn.integer import Integer
from derasn.object_descriptor import ObjectDescriptor
from derasn.oid import Oid


class PdvKind(enum.Enum):
    """The alternatives of the ``identification`` CHOICE."""

    SYNTAXES = "syntaxes"
    SYNTAX = "syntax"
    PRESENTATION_CONTEXT_ID = "presentation-context-id"
    CONTEXT_NEGOTIATION = "context-negotiation"
    TRANSFER_SYNTAX = "transfer-syntax"
    FIXED = "fixed"


@dataclass(frozen=True)
class PdvIdentification:
    """The identification of an EMBEDDED PDV; the fields used depend on ``kind``.

    SYNTAXES uses ``abstract_syntax`` and ``transfer_syntax``; SYNTAX uses ``syntax``;
    PRESENTATION_CONTEXT_ID uses ``presentation_context_id``; CONTEXT_NEGOTIATION uses
    ``presentation_context_id`` and ``transfer_syntax``; TRANSFER_SYNTAX uses
    ``transfer_syntax``; FIXED uses none.
    """

    kind: PdvKind
    abstract_syntax: Optional[Oid] = None
    transfer_syntax: Optional[Oid] = None
    syntax: Optional[Oid] = None
    presentation_context_id: Optional[Integer] = None


def _content(data: bytes) -> Tuple[bytes, bytes]:
    return b"", data


def _identification(inner: Any) -> PdvIdentification:
    # AUTOMATIC TAGS: every alternative is implicitly tagged
    number = inner.tag.value
    if number == 0:
        rem, abstract = Oid.from_ber(inner.data)
        _, transfer = Oid.from_ber(rem)
        return PdvIdentification(PdvKind.SYNTAXES, abstract_syntax=abstract, transfer_syntax=transfer)
    if number == 1:
        return PdvIdentification(PdvKind.SYNTAX, syntax=Oid(inner.data))
    if number == 2:
        return PdvIdentification(PdvKind.PRESENTATION_CONTEXT_ID, presentation_context_id=Integer(inner.data))
    if number == 3:
        rem, context_id = Any.from_ber(inner.data)
        _, presentation_syntax = Oid.from_ber(rem)
        return PdvIdentification(
            PdvKind.CONTEXT_NEGOTIATION,
            presentation_context_id=Integer(context_id.data),
            transfer_syntax=presentation_syntax,
        )
    if number == 4:
        return PdvIdentification(PdvKind.TRANSFER_SYNTAX, transfer_syntax=Oid(inner.data))
    if number == 5:
        return PdvIdentification(PdvKind.FIXED)
    raise inner.tag.invalid_value("Invalid identification tag in EMBEDDED PDV")


@dataclass(frozen=True)
class EmbeddedPdv:
    """An EMBEDDED PDV value; the data value descriptor is always absent."""

    identification: PdvIdentification
    data_value_descriptor: Optional[ObjectDescriptor]
    data_value: bytes

    TAG: ClassVar[Tag] = Tag.EMBEDDED_PDV

    @classmethod
    def from_any(cls, any: Any) -> "EmbeddedPdv":
        rem, inner = Any.from_ber_and_then(Class.CONTEXT_SPECIFIC, 0, any.data, Any.from_ber)
        identification = _identification(inner)
        _, data_value = Any.from_ber_and_then(Class.CONTEXT_SPECIFIC, 2, rem, _content)
        return cls(identification, None, data_value)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        any.header.length.assert_definite()
        any.header.assert_constructed()