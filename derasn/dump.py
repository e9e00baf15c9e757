"""Print the structure of DER-encoded files (raw or PEM) as an indented tree."""

from __future__ import annotations

import base64
import binascii
import re
import sys
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from termcolor import colored

from derasn.bitstring import BitString
from derasn.boolean import bool_from_any
from derasn.core import Any, Asn1Error, Class, Length, StringInvalidCharsetError, Tag
from derasn.embedded_pdv import EmbeddedPdv
from derasn.enumerated import Enumerated
from derasn.generalizedtime import GeneralizedTime
from derasn.integer import Integer
from derasn.oid import Oid

HEX_MAX = 64
_CHUNK = 16

_PEM_SECTION = re.compile(r"-----BEGIN ([^\r\n-]+)-----\r?\n(.*?)-----END \1-----", re.S)


def _paint(text: str, color: str, stream: TextIO) -> str:
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return colored(text, color)
    return text


def _line(out: TextIO, depth: int, text: str) -> None:
    out.write(f"{'  ' * depth}{text}\n")


def _report(depth: int, exc: Exception) -> None:
    sys.stderr.write(f"Error while parsing at depth {depth}: {exc!r}\n")


def hex_dump(data: bytes, max_len: int) -> str:
    """Hex dump of at most ``max_len`` bytes, 16 per line, with offsets and text."""
    data = bytes(data)
    shown = data[:max_len]
    lines = []
    for offset in range(0, len(shown), _CHUNK):
        chunk = shown[offset : offset + _CHUNK]
        hex_part = "".join(f"{octet:02x} " for octet in chunk) + "   " * (_CHUNK - len(chunk))
        text = bytes(octet if octet >= 32 and octet != 127 else 0x2E for octet in chunk)
        lines.append(f"{offset:08x}\t{hex_part}\t{text.decode('utf-8', 'replace')}\n")
    result = "".join(lines)
    if len(data) > max_len:
        result += "... <continued>\n"
    return result


def str_of_length(length: Length) -> str:
    """The length as a number, or ``Indefinite``."""
    return str(length)


def _ascii_text(data: bytes) -> str:
    if not data.isascii():
        raise StringInvalidCharsetError()
    return data.decode("ascii")


def _utf8_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise StringInvalidCharsetError() from None


def _print_items(data: bytes, depth: int, out: TextIO, hex_max: int) -> None:
    while data:
        try:
            data, item = Any.from_der(data)
        except Asn1Error as exc:
            _report(depth, exc)
            return
        print_der_any(item, depth, out, hex_max)


def _text_printer(label: str, decode: Callable[[bytes], str]):
    def show(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
        _line(out, depth, f"{label}: {decode(any.data)}")

    return show


def _show_bitstring(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    value = BitString.from_any(any)
    _line(out, depth, "BITSTRING")
    out.write(hex_dump(value.data, hex_max))


def _show_boolean(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    text = "true" if bool_from_any(any) else "false"
    _line(out, depth, f"BOOLEAN: {_paint(text, 'green', out)}")


def _show_embedded_pdv(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    value = EmbeddedPdv.from_any(any)
    _line(out, depth, f"EMBEDDED PDV: {value!r}")
    out.write(hex_dump(value.data_value, hex_max))


def _show_enumerated(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    _line(out, depth, f"ENUMERATED: {Enumerated.from_any(any).value}")


def _show_generalized_time(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    _line(out, depth, f"GeneralizedTime: {GeneralizedTime.from_any(any)}")


def _show_integer(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    value = Integer.from_any(any)
    try:
        _line(out, depth, str(value.as_signed(128)))
    except Asn1Error:
        out.write(hex_dump(value.data, hex_max))


def _show_null(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    """NULL has nothing to show beyond its header."""


def _show_octetstring(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    any.tag.assert_eq(Tag.OCTET_STRING)
    _line(out, depth, "OCTETSTRING")
    out.write(hex_dump(any.data, hex_max))


def _oid_printer(label: str):
    def show(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
        text = _paint(str(Oid.from_any(any)), "cyan", out)
        _line(out, depth, f"{label}: {text}")

    return show


def _show_items(any: Any, depth: int, out: TextIO, hex_max: int) -> None:
    _print_items(any.data, depth, out, hex_max)


_HANDLERS: Dict[Tag, Callable[[Any, int, TextIO, int], None]] = {
    Tag.BIT_STRING: _show_bitstring,
    Tag.BOOLEAN: _show_boolean,
    Tag.EMBEDDED_PDV: _show_embedded_pdv,
    Tag.ENUMERATED: _show_enumerated,
    Tag.GENERALIZED_TIME: _show_generalized_time,
    Tag.GENERAL_STRING: _text_printer("GeneralString", _ascii_text),
    Tag.IA5_STRING: _text_printer("IA5String", _ascii_text),
    Tag.INTEGER: _show_integer,
    Tag.NULL: _show_null,
    Tag.OCTET_STRING: _show_octetstring,
    Tag.OID: _oid_printer("OID"),
    Tag.PRINTABLE_STRING: _text_printer("PrintableString", _ascii_text),
    Tag.RELATIVE_OID: _oid_printer("RELATIVE-OID"),
    Tag.SET: _show_items,
    Tag.SEQUENCE: _show_items,
    Tag.UTC_TIME: _text_printer("UtcTime", _ascii_text),
    Tag.UTF8_STRING: _text_printer("UTF-8", _utf8_text),
}


def print_der_any(any: Any, depth: int, out: TextIO, hex_max: int = HEX_MAX) -> None:
    """Print one decoded object, and its children, at the given depth."""
    header = any.header
    if header.klass == Class.UNIVERSAL:
        class_text = _paint("UNIVERSAL", "white", out)
    else:
        class_text = _paint(str(header.klass), "cyan", out)
    tag_text = _paint(str(header.tag), "white", out)
    _line(out, depth, f"[c:{class_text} t:{header.tag.value}({tag_text}) l:{str_of_length(header.length)}]")

    if header.klass in (Class.CONTEXT_SPECIFIC, Class.APPLICATION):
        try:
            rem, inner = Any.from_der(any.data)
        except Asn1Error:
            _line(out, depth + 1, _paint("could not decode (IMPLICIT tagging?)", "red", out))
            return
        label = _paint(f"EXPLICIT [{header.tag.value}]", "green", out)
        _line(out, depth + 1, f"{label} (rem.len={len(rem)})")
        print_der_any(inner, depth + 2, out, hex_max)
        return
    if header.klass != Class.UNIVERSAL:
        _line(out, depth + 1, f"tagged: [{header.tag.value}] {_paint('*NOT SUPPORTED*', 'red', out)}")
        return

    handler = _HANDLERS.get(header.tag)
    if handler is None:
        raise Asn1Error(f"unsupported tag {header.tag}")
    handler(any, depth + 1, out, hex_max)


def print_der(data: bytes, depth: int, out: TextIO, hex_max: int = HEX_MAX) -> None:
    """Decode one DER object from ``data`` and print it; report trailing bytes."""
    try:
        rem, any = Any.from_der(data)
    except Asn1Error as exc:
        _report(depth, exc)
        return
    print_der_any(any, depth, out, hex_max)
    if rem:
        warning = f"WARNING: {len(rem)} extra bytes after object"
        _line(out, depth, _paint(warning, "red", out))
        out.write(hex_dump(rem, hex_max))


def _parse_pem(content: bytes) -> List[Tuple[str, bytes]]:
    text = content.decode("latin-1")
    sections = []
    for match in _PEM_SECTION.finditer(text):
        body = "".join(line.strip() for line in match.group(2).splitlines() if ":" not in line)
        try:
            decoded = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Parsing PEM failed") from None
        sections.append((match.group(1), decoded))
    return sections


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Dump every file named on the command line."""
    filenames = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout
    err = sys.stderr
    for filename in filenames:
        err.write(f"File: {filename}\n")
        try:
            with open(filename, "rb") as handle:
                content = handle.read()
            if filename.endswith(".pem") or content.startswith(b"----"):
                sections = _parse_pem(content)
                if not sections:
                    err.write(_paint("No PEM section decoded", "red", err) + "\n")
                    continue
                for idx, (label, body) in enumerate(sections):
                    err.write(f"Pem entry {idx} [{_paint(label, 'blue', err)}]\n")
                    print_der(body, 1, out, HEX_MAX)
            else:
                print_der(content, 1, out, HEX_MAX)
        except (OSError, ValueError) as exc:
            err.write(f"Error: {exc}\n")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())