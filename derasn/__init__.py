"""Parse and encode ASN.1 objects in BER and DER, with a tool that dumps DER files."""

__version__ = "0.1.0"