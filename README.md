# derasn

A library for reading and writing ASN.1 objects in BER and DER (X.690)
encoding. It also includes a command-line tool that dumps the structure
of DER files.

## Installation

```
pip install derasn
```

## Parsing any object

Any encoded object can be read as an `Any` from `derasn.core`. An `Any`
holds a `Header` and the raw content bytes. The header records the
`Class`, the `Tag`, whether the object is constructed, and its `Length`.

Parsing returns a pair: the bytes that follow the object, and the
object itself.

```python
from derasn.core import Any, Tag

rest, obj = Any.from_der(bytes.fromhex("020101"))
assert obj.header.tag == Tag.INTEGER
assert obj.as_bytes() == b"\x01"
assert rest == b""
```

`Any.from_ber` also accepts indefinite lengths, which end with
end-of-contents octets. `Any.from_der` requires definite lengths in
their shortest form.

`Any.from_ber_and_then` and `Any.from_der_and_then` do three things in
turn:

1. Parse one object.
2. Check its class and tag.
3. Hand its content to a parsing function.

Errors are raised as subclasses of `derasn.core.Asn1Error`, which is
itself a `ValueError`. The subclasses include:

- `UnexpectedTagError`
- `UnexpectedClassError`
- `InvalidLengthError`
- `InvalidValueError`
- `IncompleteError`
- `IntegerTooLargeError`
- `IntegerNegativeError`
- `StringInvalidCharsetError`
- `DerConstraintError`, which carries a `DerConstraint` member naming the rule that was broken.

## Typed values

Most ASN.1 types have a class derived from `derasn.core.Asn1Type`. Each
of these classes offers:

- `from_any` to build a value from an `Any`
- `from_ber` and `from_der` to parse a value straight from bytes
- `to_der` to encode the value as DER

| Module | Class |
| --- | --- |
| `derasn.integer` | `Integer` |
| `derasn.boolean` | `Boolean` |
| `derasn.null` | `Null` |
| `derasn.enumerated` | `Enumerated` |
| `derasn.real` | `Real` |
| `derasn.bitstring` | `BitString` |
| `derasn.octetstring` | `OctetString` |
| `derasn.oid` | `Oid`, absolute and relative |
| `derasn.generalizedtime` | `GeneralizedTime` |
| `derasn.object_descriptor` | `ObjectDescriptor` |

```python
from derasn.integer import Integer
from derasn.oid import Oid

i = Integer.from_int(-2)
assert i.to_der() == b"\x02\x01\xfe"

oid = Oid.parse("1.2.840.113549.1")
assert oid.to_der() == bytes.fromhex("06072a864886f70d01")
assert oid.to_id_string() == "1.2.840.113549.1"
```

`from_der` also checks each type's DER rules before decoding. For
example:

- integers must use the minimal encoding
- booleans must be `0x00` or `0xff`
- the padding bits of a bit string must be zero
- a generalized time must end in `Z`

`derasn.integer` has helpers that decode to sized Python integers:

- `parse_der_unsigned` and `parse_der_signed`
- `decode_unsigned` and `decode_signed`
- `encode_der_int`

Each of the decoding helpers takes a bit width.

`derasn.embedded_pdv.EmbeddedPdv` decodes EMBEDDED PDV values through
`from_any` and checks them with `check_constraints`. It has no
`from_der` and no encoder.

`derasn.optional` covers three things:

- `parse_optional_ber` and `parse_optional_der` return `None` when the input is empty or carries a different tag.
- `can_decode` checks a tag against a type.
- `EndOfContent` is the BER end-of-contents marker.

## Content encoders

`derasn.encode` returns raw content bytes, without a header. It
provides:

- `encode_oid` for an OID written as text; prefix the text with `"rel "` for a relative OID.
- `encode_int` for an unsigned 64-bit integer.
- `encode_base128` for the base-128 form used in OID arcs.

```python
from derasn.encode import encode_oid, encode_int

assert encode_oid("1.2.840.113549") == bytes([0x2a, 0x86, 0x48, 0x86, 0xf7, 0x0d])
assert encode_int(1234) == bytes([0x04, 0xd2])
```

## Dumping DER files

```
derasn-dump certificate.der key.pem
```

For each file, the tool prints an indented tree of objects to standard
output.

- Each line shows the class, tag and length of an object.
- Values of simple types are printed as text.
- Binary content is printed as a hex dump, cut off after 64 bytes.
- Context-specific and application objects are decoded as explicitly tagged where possible.
- Colours are used only when the output is a terminal.

Files that end in `.pem`, or that start with `----`, are read as PEM.
Each PEM section is then dumped in turn.

The same functions can be called from Python:

- `derasn.dump.print_der`
- `derasn.dump.print_der_any`
- `derasn.dump.hex_dump`

## What is not included

- SEQUENCE and SET have no typed classes. They are handled only as `Any` objects, and the dump tool walks through their contents.
- There is no way to declare structured types such as sequences of named fields.
- Character string types other than `ObjectDescriptor` have no classes. This includes UTF8String, IA5String, PrintableString and UTCTime.
- The dump tool prints some of these string types as plain text. It stops with an error on universal tags it does not know, such as VisibleString or BMPString.