"""
CBOR/XML Name Dictionary (CXDICT) Package

Maps XML namespace, element, attribute and enum value names to compact
binary name tokens for CBOR-encoded XML documents, and back.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - XML parsing
    - Schema validation
    - CBOR byte encoding
    - Encoding of element/attribute values

This package defines NAME MAPPINGS only.

Encoders ask for tokens (forward lookup).
Decoders ask for names (reverse lookup).
"""

__version__ = "0.1.0"

from cxdict.tokens import NameToken, TokenType
from cxdict.model import (
    ComplexElement,
    EnumValueAttribute,
    EnumValueElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
)
from cxdict.dictionary import Dictionary, DictionaryPathError
from cxdict.parser import DictionaryParseError, DictionarySourceError

__all__ = [
    "NameToken",
    "TokenType",
    "SimpleAttribute",
    "EnumValueAttribute",
    "SimpleElement",
    "EnumValueElement",
    "ComplexElement",
    "Namespace",
    "Dictionary",
    "DictionaryPathError",
    "DictionaryParseError",
    "DictionarySourceError",
]
