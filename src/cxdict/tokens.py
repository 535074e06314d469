"""
Name Tokens for CXDICT

A NameToken is the binary name emitted in place of an XML name.
It mirrors the small subset of CBOR data items a dictionary may use:
unsigned and negative integers, doubles, byte strings, text strings
and booleans. Any of them may carry a numeric tag.

ARCHITECTURAL RULE:
    Tokens are values, not buffers.
    They are immutable and know nothing about byte-level CBOR encoding.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union


UINT_MAX = 2 ** 64 - 1
NEGINT_MIN = -(2 ** 63)


class TokenType(Enum):
    """
    Token variants.

    The enum values are the type names used by the dictionary
    description language, e.g. ``t'access-request'[uint(0)]``.
    """

    UNSIGNED_INT = "uint"
    NEGATIVE_INT = "negint"
    DOUBLE = "double"
    BYTE_STRING = "bytestr"
    UNICODE_STRING = "unistr"
    BOOL = "bool"


TokenValue = Union[int, float, bytes, str, bool]


@dataclass(frozen=True)
class NameToken:
    """
    Represents a binary name.

    Properties:
        type: TokenType variant
        value: Payload, checked against the variant
        tag: Optional non-negative CBOR tag number

    Two tokens are equal if variant, payload and tag are equal.
    A tagged token is NOT equal to its untagged counterpart.
    """

    type: TokenType
    value: TokenValue
    tag: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.type, TokenType):
            raise ValueError(f"Unknown token type: {self.type!r}")

        object.__setattr__(self, "value", _check_value(self.type, self.value))

        if self.tag is not None:
            if isinstance(self.tag, bool) or not isinstance(self.tag, int) or self.tag < 0:
                raise ValueError(f"Token tag must be a non-negative integer, got {self.tag!r}")

    @classmethod
    def uint(cls, value: int, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.UNSIGNED_INT, value, tag)

    @classmethod
    def negint(cls, value: int, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.NEGATIVE_INT, value, tag)

    @classmethod
    def double(cls, value: float, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.DOUBLE, value, tag)

    @classmethod
    def bytestr(cls, value: bytes, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.BYTE_STRING, value, tag)

    @classmethod
    def unistr(cls, value: str, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.UNICODE_STRING, value, tag)

    @classmethod
    def boolean(cls, value: bool, tag: Optional[int] = None) -> "NameToken":
        return cls(TokenType.BOOL, value, tag)

    @property
    def has_tag(self) -> bool:
        return self.tag is not None

    def clone(self) -> "NameToken":
        """Return an equal but distinct token, tag included."""
        return replace(self)

    def with_tag(self, tag: Optional[int]) -> "NameToken":
        return replace(self, tag=tag)

    def without_tag(self) -> "NameToken":
        return replace(self, tag=None)

    def __str__(self) -> str:
        value = self.value.hex() if isinstance(self.value, bytes) else self.value
        if self.tag is None:
            return f"{self.type.value}({value})"
        return f"{self.tag}:{self.type.value}({value})"


def _check_value(token_type: TokenType, value) -> TokenValue:
    """Validate (and lightly coerce) a payload for the given variant."""
    if token_type is TokenType.BOOL:
        if not isinstance(value, bool):
            raise ValueError(f"bool token requires a bool, got {value!r}")
        return value

    if token_type in (TokenType.UNSIGNED_INT, TokenType.NEGATIVE_INT):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{token_type.value} token requires an int, got {value!r}")
        if token_type is TokenType.UNSIGNED_INT and not 0 <= value <= UINT_MAX:
            raise ValueError(f"uint token out of range: {value}")
        if token_type is TokenType.NEGATIVE_INT and not NEGINT_MIN <= value < 0:
            raise ValueError(f"negint token out of range: {value}")
        return value

    if token_type is TokenType.DOUBLE:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"double token requires a float, got {value!r}")
        return float(value)

    if token_type is TokenType.BYTE_STRING:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        if not isinstance(value, bytes):
            raise ValueError(f"bytestr token requires bytes, got {value!r}")
        return value

    if not isinstance(value, str):
        raise ValueError(f"unistr token requires a str, got {value!r}")
    return value
