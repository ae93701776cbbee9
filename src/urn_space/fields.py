"""Helpers for NSS values made of a fixed sequence of named fields

These build functions suitable for the `decode` and `encode` options of a
`UrnSpace`, e.g. `urn:component:log4j:1.0` with fields `["name", "version"]`.
"""

from typing import Callable, Dict, List, Mapping


class FieldCountError(ValueError):
    """NSS does not split into the expected number of fields"""
    def __init__(self, nss: str, expected: int, actual: int):
        self.nss = nss
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} fields in '{nss}' but found {actual}")


def decode_fields(names: List[str], sep: str = ":") -> Callable[[str], Dict[str, str]]:
    """Return a decoder splitting an NSS into a dict keyed by `names`"""
    names = list(names)

    def decode(nss: str) -> Dict[str, str]:
        parts = nss.split(sep)
        if len(parts) != len(names):
            raise FieldCountError(nss, len(names), len(parts))
        return dict(zip(names, parts))

    return decode


def encode_fields(names: List[str], sep: str = ":") -> Callable[[Mapping[str, str]], str]:
    """Return an encoder joining the values for `names` in order

    The inverse of `decode_fields`. Values may not contain `sep`.
    """
    names = list(names)

    def encode(fields: Mapping[str, str]) -> str:
        values = []
        for name in names:
            value = fields[name]
            if sep in value:
                raise ValueError(f"Value for field '{name}' contains separator '{sep}': '{value}'")
            values.append(value)
        return sep.join(values)

    return encode
