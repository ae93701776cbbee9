"""URN Space - URN parsing and namespace validation

This package provides a parser and serializer for URNs
(`urn:<NID>:<NSS>[?+r][?=q][#f]`) and `UrnSpace`, which validates, creates
and decodes URNs belonging to a single namespace.
"""

from .urn import (
    ParsedUrn,
    parse_urn,
    serialize_urn,
    create_urn,
    encode_nss,
    decode_nss,
    UrnError,
    MalformedUrnError,
    MissingSchemeError,
    InvalidNidError,
    EmptyNssError,
    InvalidPercentEncodingError,
    NotMemberError,
    ConfigurationError,
    DecodeError,
)
from .space import UrnSpace, DecodedUrn, Urn
from .fields import decode_fields, encode_fields, FieldCountError

__version__ = "0.1.0"

__all__ = [
    "ParsedUrn",
    "parse_urn",
    "serialize_urn",
    "create_urn",
    "encode_nss",
    "decode_nss",
    "UrnSpace",
    "DecodedUrn",
    "Urn",
    "decode_fields",
    "encode_fields",
    "FieldCountError",
    "UrnError",
    "MalformedUrnError",
    "MissingSchemeError",
    "InvalidNidError",
    "EmptyNssError",
    "InvalidPercentEncodingError",
    "NotMemberError",
    "ConfigurationError",
    "DecodeError",
]
