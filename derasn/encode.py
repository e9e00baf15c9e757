"""Encoders producing the DER content bytes of object identifiers and integers."""

from __future__ import annotations

import re

_COMPONENT = re.compile(r"\+?[0-9]+")
_U128_LIMIT = 1 << 128
_U64_LIMIT = 1 << 64


def _invalid_oid(message: str) -> ValueError:
    return ValueError(f"Invalid OID({message})")


def encode_base128(value: int) -> bytes:
    """Encode a non-negative integer as big-endian base-128 with continuation bits."""
    if value < 0:
        raise ValueError("base-128 encoding needs a non-negative value")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append(0x80 | (value & 0x7F))
        value >>= 7
    return bytes(reversed(groups))


def _parse_component(text: str) -> int:
    text = text.strip()
    if not _COMPONENT.fullmatch(text):
        raise _invalid_oid("Could not parse OID")
    value = int(text)
    if value >= _U128_LIMIT:
        raise _invalid_oid("Could not parse OID")
    return value


def encode_oid(text: str) -> bytes:
    """Encode a dotted OID such as ``"1.2.840"`` (or ``"rel 42.23"``) to its content bytes."""
    relative = text.startswith("rel ")
    body = text[4:] if relative else text
    items = [_parse_component(part) for part in body.split(".")]
    encoded = bytearray()
    if not relative:
        if len(items) < 2:
            if items == [0]:
                return b"\x00"
            raise _invalid_oid("Need at least two components for non-relative oid")
        if items[0] > 2 or items[1] > 39:
            raise _invalid_oid("First components are too big")
        encoded.append((items[0] * 40 + items[1]) & 0xFF)
        items = items[2:]
    for item in items:
        encoded += encode_base128(item)
    return bytes(encoded)


def encode_int(value: int) -> bytes:
    """Big-endian bytes of an unsigned 64-bit value, with leading zero bytes removed."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("an integer is required")
    if not 0 <= value < _U64_LIMIT:
        raise ValueError("value does not fit into an unsigned 64-bit integer")
    return value.to_bytes(8, "big").lstrip(b"\x00")