"""Namespace-bound URN validation

A `UrnSpace` binds one namespace identifier (NID) and optional semantic rules
for the namespace specific string (NSS). With a space in hand you can create
URNs that belong to it, check whether arbitrary strings belong to it, and
extract the decoded NSS of its members.
"""

from typing import Any, Callable, Generic, NewType, Optional, TypeVar

from .urn import (
    ConfigurationError,
    DecodeError,
    MalformedUrnError,
    NotMemberError,
    ParsedUrn,
    UrnError,
    create_urn,
    parse_urn,
)

R = TypeVar("R")

# A string known to be a member of some UrnSpace. There is no runtime
# difference from `str`; only `UrnSpace` hands these out.
Urn = NewType("Urn", str)


class DecodedUrn(ParsedUrn, Generic[R]):
    """A parsed URN together with the result of its space's decode function"""

    def __init__(self, parsed: ParsedUrn, decoded: R):
        super().__init__(
            parsed.nid,
            parsed.nss,
            parsed.nss_encoded,
            rcomponent=parsed.rcomponent,
            qcomponent=parsed.qcomponent,
            fragment=parsed.fragment,
        )
        self.decoded = decoded

    def __repr__(self) -> str:
        return f"DecodedUrn('{self.to_string()}', decoded={self.decoded!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecodedUrn):
            return False
        return self._key() == other._key() and self.decoded == other.decoded

    def __hash__(self) -> int:
        return hash(self._key())


class UrnSpace(Generic[R]):
    """The set of URNs sharing a namespace identifier

    Examples:
    - `UrnSpace("example")` accepts `urn:example:anything`
    - `UrnSpace("example", pred=lambda s: s in ("a", "b"))` accepts only
      `urn:example:a` and `urn:example:b`
    - `UrnSpace("user", decode=decode_fields(["org", "id"]))` accepts
      `urn:user:acme:42` and decodes it to `{"org": "acme", "id": "42"}`

    Only bare URNs (no rcomponent, qcomponent or fragment) are members.
    """

    def __init__(self, nid: str,
                 pred: Optional[Callable[[str], bool]] = None,
                 encode: Optional[Callable[[Any], str]] = None,
                 decode: Optional[Callable[[str], R]] = None):
        """Create a space for `nid`

        `pred` restricts which decoded NSS values are members, `encode` turns
        a richer value into a raw NSS for `urn()`, and `decode` turns an NSS
        into a semantic value. A `decode` that raises marks the NSS as not a
        member.
        """
        self._nid = nid
        self._pred = pred
        self._encode = encode
        self._decode = decode

    @property
    def nid(self) -> str:
        """The namespace identifier of this space"""
        return self._nid

    def urn(self, value: Any) -> Urn:
        """Create a new URN in this space

        With an `encode` function `value` is encoded first, otherwise it is
        used as the raw NSS text. The result is checked with `assume`; a
        rejection means the space's own options disagree with each other and
        raises `ConfigurationError`. Without an `encode` function `value`
        must be a string.
        """
        if self._encode is not None:
            nss = self._encode(value)
        elif isinstance(value, str):
            nss = value
        else:
            raise TypeError(
                f"UrnSpace('{self._nid}') has no encode function, NSS must be a string, not {type(value).__name__}"
            )
        created = create_urn(self._nid, nss)
        try:
            return self.assume(created)
        except NotMemberError as e:
            raise ConfigurationError(created, self._nid, f", built from {value!r}{e.reason}") from e

    def is_member(self, s: str) -> bool:
        """Check whether `s` belongs to this space

        Runs `assume` and turns any URN error into False.
        """
        try:
            self.assume(s)
            return True
        except UrnError:
            return False

    def __contains__(self, s: object) -> bool:
        return self.is_member(s)

    def assume(self, s: str) -> Urn:
        """Narrow `s` to a member of this space or raise `NotMemberError`

        Use this when you expect `s` to conform, e.g. for a URN read from a
        JSON payload, to skip the conditional around `is_member`.
        """
        try:
            parsed = parse_urn(s)
        except MalformedUrnError as e:
            raise NotMemberError(s, self._nid, f", not a valid URN: {e}") from e

        if parsed.nid != self._nid:
            raise NotMemberError(s, self._nid, f", namespace is '{parsed.nid}'")

        if not parsed.is_bare():
            raise NotMemberError(s, self._nid, ", optional components are not allowed")

        if self._pred is not None:
            try:
                accepted = self._pred(parsed.nss)
            except Exception as e:
                raise NotMemberError(s, self._nid, f", predicate raised: {e}") from e
            if not accepted:
                raise NotMemberError(s, self._nid, ", predicate failed")

        if self._decode is not None:
            try:
                self._decode(parsed.nss)
            except Exception as e:
                raise NotMemberError(s, self._nid, f", fails in decoding: {e}") from e

        return Urn(s)

    def parse(self, urn: str) -> DecodedUrn[R]:
        """Parse a member of this space and run its decode function

        Without a `decode` function `decoded` is an empty dict.
        """
        self.assume(urn)
        parsed = parse_urn(urn)

        if self._decode is None:
            decoded = {}
        else:
            try:
                decoded = self._decode(parsed.nss)
            except Exception as e:
                raise DecodeError(urn, self._nid, str(e)) from e

        return DecodedUrn(parsed, decoded)

    def nss(self, urn: str) -> str:
        """Extract the (decoded) NSS of a member of this space"""
        return self.parse(urn).nss

    def decode(self, urn: str) -> R:
        """Extract the result of the decode function for a member of this space"""
        return self.parse(urn).decoded

    def __repr__(self) -> str:
        return f"UrnSpace('{self._nid}')"
