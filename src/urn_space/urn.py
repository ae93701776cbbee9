"""URN Grammar Codec

This module converts between URN strings of the form
`urn:<NID>:<NSS>[?+<rcomponent>][?=<qcomponent>][#<fragment>]` and a
structured `ParsedUrn` record. It has no knowledge of namespace semantics.
"""

import re
from enum import Enum
from typing import Optional
from urllib.parse import quote, unquote


SCHEME = "urn"
RESERVED_NID = "urn"

NID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]{0,30}")
BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")

# pchar from RFC 8141 plus "/", without the characters that open components
NSS_SAFE_CHARS = "!$&'()*+,;=:@/"

R_DELIMITER = "?+"
Q_DELIMITER = "?="
F_DELIMITER = "#"


# Error classes
class UrnError(Exception):
    """Base exception for URN errors"""
    pass


class MalformedUrnError(UrnError):
    """Input does not conform to the URN grammar"""
    pass


class MissingSchemeError(MalformedUrnError):
    """Input does not start with 'urn:'"""
    pass


class InvalidNidError(MalformedUrnError):
    """Namespace identifier is missing, empty, reserved or has bad characters"""
    pass


class EmptyNssError(MalformedUrnError):
    """Namespace specific string is empty"""
    pass


class InvalidPercentEncodingError(MalformedUrnError):
    """NSS contains a broken %-escape or does not decode as UTF-8"""
    pass


class NotMemberError(UrnError):
    """A URN does not belong to a given namespace"""
    def __init__(self, urn: object, nid: str, reason: str):
        self.urn = urn
        self.nid = nid
        self.reason = reason
        super().__init__(
            f"Assumption that '{urn}' belongs to the specified UrnSpace('{nid}') is faulty{reason}"
        )


class ConfigurationError(NotMemberError):
    """A URN built by a namespace is rejected by that same namespace"""
    pass


class DecodeError(UrnError):
    """The decode function failed after membership was already confirmed"""
    def __init__(self, urn: str, nid: str, message: str):
        self.urn = urn
        self.nid = nid
        super().__init__(f"Decoding '{urn}' in UrnSpace('{nid}') failed: {message}")


class ParseState(Enum):
    """Parser states for the component scanner"""
    IN_NSS = 1
    IN_RCOMPONENT = 2
    IN_QCOMPONENT = 3
    IN_FRAGMENT = 4


def encode_nss(text: str) -> str:
    """Percent-encode text for use as an NSS

    Non-ASCII characters are encoded as UTF-8. `?`, `#` and `%` are always
    escaped so the result can never open an optional component.
    """
    return quote(text, safe=NSS_SAFE_CHARS)


def decode_nss(text: str) -> str:
    """Remove %-escapes from an NSS, failing on malformed escapes"""
    bad = BAD_ESCAPE_PATTERN.search(text)
    if bad:
        raise InvalidPercentEncodingError(
            f"invalid percent escape '{text[bad.start():bad.start() + 3]}' at position {bad.start()}"
        )
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidPercentEncodingError(f"NSS '{text}' does not decode as UTF-8: {e.reason}") from e


class ParsedUrn:
    """A URN split into its component parts

    `nss` holds the percent-decoded namespace specific string and
    `nss_encoded` the text as it appears in the URN. Optional components are
    `None` when absent and `""` when present but empty.
    """

    def __init__(self, nid: str, nss: str, nss_encoded: Optional[str] = None,
                 rcomponent: Optional[str] = None, qcomponent: Optional[str] = None,
                 fragment: Optional[str] = None):
        self.nid = nid
        self.nss = nss
        self.nss_encoded = nss if nss_encoded is None else nss_encoded
        self.rcomponent = rcomponent
        self.qcomponent = qcomponent
        self.fragment = fragment

    @classmethod
    def from_string(cls, s: str) -> 'ParsedUrn':
        """Parse a URN string

        The `urn:` prefix is matched case-insensitively; the NID is kept as
        written. The NSS ends at the first `?+`, `?=` or `#`. Within the
        rcomponent only `?=` and `#` start a new component, within the
        qcomponent only `#` does.
        """
        if not isinstance(s, str):
            raise MalformedUrnError(f"URN must be a string, not {type(s).__name__}")

        prefix = SCHEME + ":"
        if s[:len(prefix)].lower() != prefix:
            raise MissingSchemeError(f"URN must start with '{prefix}': '{s}'")

        rest = s[len(prefix):]
        colon_pos = rest.find(':')
        if colon_pos == -1:
            raise InvalidNidError(f"URN must have a namespace identifier followed by ':': '{s}'")

        nid = rest[:colon_pos]
        if not nid:
            raise InvalidNidError("URN namespace identifier cannot be empty")
        if not NID_PATTERN.fullmatch(nid):
            raise InvalidNidError(f"invalid namespace identifier '{nid}'")
        if nid.lower() == RESERVED_NID:
            raise InvalidNidError(f"namespace identifier '{nid}' is reserved")

        segments = {
            ParseState.IN_NSS: "",
            ParseState.IN_RCOMPONENT: None,
            ParseState.IN_QCOMPONENT: None,
            ParseState.IN_FRAGMENT: None,
        }
        state = ParseState.IN_NSS
        body = rest[colon_pos + 1:]
        start = 0
        pos = 0

        while pos < len(body):
            pair = body[pos:pos + 2]
            next_state = None

            if body[pos] == F_DELIMITER and state != ParseState.IN_FRAGMENT:
                next_state = ParseState.IN_FRAGMENT
                width = 1
            elif pair == Q_DELIMITER and state in (ParseState.IN_NSS, ParseState.IN_RCOMPONENT):
                next_state = ParseState.IN_QCOMPONENT
                width = 2
            elif pair == R_DELIMITER and state == ParseState.IN_NSS:
                next_state = ParseState.IN_RCOMPONENT
                width = 2

            if next_state is None:
                pos += 1
                continue

            segments[state] = body[start:pos]
            state = next_state
            pos += width
            start = pos

        segments[state] = body[start:]

        nss_encoded = segments[ParseState.IN_NSS]
        if not nss_encoded:
            raise EmptyNssError(f"URN namespace specific string cannot be empty: '{s}'")

        return cls(
            nid,
            decode_nss(nss_encoded),
            nss_encoded,
            rcomponent=segments[ParseState.IN_RCOMPONENT],
            qcomponent=segments[ParseState.IN_QCOMPONENT],
            fragment=segments[ParseState.IN_FRAGMENT],
        )

    def to_string(self) -> str:
        """Reassemble the URN string

        Components are emitted in the fixed order rcomponent, qcomponent,
        fragment. `nss_encoded` is written as-is.
        """
        result = f"{SCHEME}:{self.nid}:{self.nss_encoded}"
        if self.rcomponent is not None:
            result += R_DELIMITER + self.rcomponent
        if self.qcomponent is not None:
            result += Q_DELIMITER + self.qcomponent
        if self.fragment is not None:
            result += F_DELIMITER + self.fragment
        return result

    def is_bare(self) -> bool:
        """True when no rcomponent, qcomponent or fragment is present"""
        return self.rcomponent is None and self.qcomponent is None and self.fragment is None

    def _key(self):
        return (self.nid, self.nss, self.nss_encoded,
                self.rcomponent, self.qcomponent, self.fragment)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ParsedUrn('{self.to_string()}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParsedUrn):
            return False
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def parse_urn(s: str) -> ParsedUrn:
    """Parse a URN string into a `ParsedUrn`"""
    return ParsedUrn.from_string(s)


def serialize_urn(parts: ParsedUrn) -> str:
    """Serialize a `ParsedUrn` back into a URN string"""
    return parts.to_string()


def create_urn(nid: str, nss: str) -> str:
    """Build a bare URN string; `nss` must already be percent-encoded"""
    return ParsedUrn(nid, nss).to_string()
