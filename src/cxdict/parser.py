"""
Description Parser for CXDICT (Raw Text → Dictionary Model).

Converts a line-oriented dictionary description into Namespace objects.

Description Format:
    n'NAME'[TYPE(VALUE)] {      namespace, optional block of t lines
    t'NAME'[TYPE(VALUE)] {      element, optional block of a, e and t lines
    a'NAME'[TYPE(VALUE)] {      attribute, optional block of e lines
    e'NAME'[TYPE(VALUE)]        enum value
    }                           closes the innermost block

Syntax Notes:
    - TYPE is one of uint, negint, double, bytestr, unistr, bool
    - Leading/trailing whitespace is ignored, blank lines are skipped
    - A trailing "{}" declares an empty block
    - Comments are not supported

Example:
    n'http://www.trustedcomputinggroup.org/2010/IFMAP/2'[uint(1)] {
        t'access-request'[uint(0)] {
            a'name'[uint(0)]
        }
    }
"""

import io
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from cxdict.model import (
    ComplexElement,
    EnumValueAttribute,
    EnumValueElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
)
from cxdict.tokens import NameToken, TokenType


logger = logging.getLogger(__name__)

LINE_PATTERN = re.compile(r"^([aent])'(.+)'\[([A-Za-z]+)\((.*)\)\]\s*(\{|\{\s*\})?$")
BLOCK_END = "}"

_HEX_RE = re.compile(r"^(?:[0-9A-Fa-f]{2})+$")
_UINT_RE = re.compile(r"^[0-9]+$")
_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_DOUBLE_RE = re.compile(r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|NaN|Infinity)$")


class DictionaryParseError(Exception):
    """Raised when a dictionary description is malformed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class MalformedLineError(DictionaryParseError):
    """A line matches none of the definition forms."""
    pass


class IllegalLineTypeError(DictionaryParseError):
    """A well-formed line appears where its type is not allowed."""
    pass


class UnknownCborTypeError(DictionaryParseError):
    """The TYPE of a definition is not a known token type."""
    pass


class InvalidCborValueError(DictionaryParseError):
    """The VALUE of a definition cannot be converted to its TYPE."""
    pass


class StructuralConflictError(DictionaryParseError):
    """An element block holds both nested elements and enum values."""
    pass


class UnexpectedEofError(DictionaryParseError):
    """The input ended inside an open block."""
    pass


class DictionarySourceError(Exception):
    """Raised when reading the description source fails."""
    pass


class LineSource:
    """
    Yields the non-blank lines of a description, trimmed.

    Accepts any iterable of str or bytes lines (open files, lists,
    ``io.StringIO``). Bytes are decoded with ``encoding``. Anything the
    iterable raises is re-raised as DictionarySourceError.
    """

    def __init__(self, lines: Iterable, encoding: str = "utf-8"):
        self._lines: Iterator = iter(lines)
        self._encoding = encoding
        self.line_number = 0

    def next_line(self) -> Optional[str]:
        """
        Return the next non-blank trimmed line, or None at end of input.

        Raises:
            DictionarySourceError: If the underlying source fails
        """
        while True:
            try:
                raw = next(self._lines)
                if isinstance(raw, bytes):
                    raw = raw.decode(self._encoding)
            except StopIteration:
                logger.debug("Reached end of dictionary description")
                return None
            except Exception as e:
                raise DictionarySourceError(
                    f"Failed while reading the description after line {self.line_number}: {e}"
                ) from e

            if not isinstance(raw, str):
                raise DictionarySourceError(
                    f"Description lines must be str or bytes, got {type(raw).__name__} "
                    f"after line {self.line_number}"
                )

            self.line_number += 1
            line = raw.strip()
            if line:
                logger.debug(f"Source line {self.line_number}: {line}")
                return line


@dataclass
class DefinitionLine:
    """Parsed definition line."""
    kind: str  # One of "n", "t", "a", "e"
    name: str
    cbor_type: str
    value: str
    opens_block: bool
    line_number: int


def _read_definition(source: LineSource) -> Optional[DefinitionLine]:
    """
    Read the next line of an open block.

    Returns:
        The definition, or None if the line closes the block

    Raises:
        UnexpectedEofError: If the input ends before the block is closed
    """
    line = source.next_line()
    if line is None:
        raise UnexpectedEofError("Unexpected end of input inside a block", source.line_number)
    if line == BLOCK_END:
        return None
    return _match_line(line, source.line_number)


def _match_line(line: str, line_number: int) -> DefinitionLine:
    m = LINE_PATTERN.match(line)
    if m is None:
        raise MalformedLineError(f"Source contains illegal line: {line}", line_number)

    kind, name, cbor_type, value, brace = m.groups()
    if not name.strip():
        raise MalformedLineError(f"Blank name in line: {line}", line_number)

    if kind == "e" and brace is not None:
        raise MalformedLineError(f"Enum value definitions cannot open a block: {line}", line_number)

    return DefinitionLine(
        kind=kind,
        name=name,
        cbor_type=cbor_type,
        value=value,
        opens_block=brace == "{",
        line_number=line_number,
    )


def parse_name_token(cbor_type: str, value: str, line_number: Optional[int] = None) -> NameToken:
    """
    Build a NameToken from the TYPE and VALUE parts of a definition.

    Args:
        cbor_type: One of uint, negint, double, bytestr, unistr, bool
        value: Textual value; negint values carry their own sign

    Raises:
        UnknownCborTypeError: If ``cbor_type`` is unknown
        InvalidCborValueError: If ``value`` is blank or does not fit the type
    """
    try:
        token_type = TokenType(cbor_type)
    except ValueError:
        raise UnknownCborTypeError(f"Unknown CBOR type found: {cbor_type}", line_number)

    if not value or not value.strip():
        raise InvalidCborValueError("CBOR value must not be blank", line_number)

    try:
        if token_type is TokenType.UNSIGNED_INT:
            if not _UINT_RE.match(value):
                raise ValueError(f"not an unsigned decimal integer: {value}")
            return NameToken.uint(int(value))

        if token_type is TokenType.NEGATIVE_INT:
            if not _INT_RE.match(value):
                raise ValueError(f"not a decimal integer: {value}")
            return NameToken.negint(int(value))

        if token_type is TokenType.DOUBLE:
            if not _DOUBLE_RE.fullmatch(value):
                raise ValueError(f"not a decimal floating point literal: {value}")
            return NameToken.double(float(value))

        if token_type is TokenType.BYTE_STRING:
            if not _HEX_RE.match(value):
                raise ValueError(f"not an even-length hex string: {value}")
            return NameToken.bytestr(bytes.fromhex(value))

        if token_type is TokenType.BOOL:
            if value.lower() not in ("true", "false"):
                raise ValueError(f"not a boolean: {value}")
            return NameToken.boolean(value.lower() == "true")

        return NameToken.unistr(value)
    except ValueError as e:
        raise InvalidCborValueError(f"Invalid {cbor_type} value: {e}", line_number) from e


def _token_of(definition: DefinitionLine) -> NameToken:
    return parse_name_token(definition.cbor_type, definition.value, definition.line_number)


def _parse_namespace(definition: DefinitionLine, source: LineSource) -> Namespace:
    """Parse a namespace line and, if it opens a block, its elements."""
    if definition.kind != "n":
        raise IllegalLineTypeError(
            f"Illegal line type for namespace definition: {definition.kind}",
            definition.line_number,
        )

    namespace = Namespace(definition.name, _token_of(definition))

    if definition.opens_block:
        nested = _read_definition(source)
        while nested is not None:
            namespace.add_element(_parse_element(nested, source))
            nested = _read_definition(source)

    return namespace


def _parse_element(definition: DefinitionLine, source: LineSource) -> SimpleElement:
    """
    Parse an element (tag) line and, if it opens a block, its contents.

    The element variant follows from the block contents:
        nested t lines -> ComplexElement
        nested e lines -> EnumValueElement
        neither        -> SimpleElement
    """
    if definition.kind != "t":
        raise IllegalLineTypeError(
            f"Illegal line type for element (tag) definition: {definition.kind}",
            definition.line_number,
        )

    xml_name = definition.name
    cbor_name = _token_of(definition)

    if not definition.opens_block:
        return SimpleElement(xml_name, cbor_name)

    attributes: List[SimpleAttribute] = []
    elements: List[SimpleElement] = []
    enum_values: Dict[str, NameToken] = {}

    nested = _read_definition(source)
    while nested is not None:
        if nested.kind == "a":
            attributes.append(_parse_attribute(nested, source))
        elif nested.kind == "e":
            enum_values[nested.name] = _token_of(nested)
        elif nested.kind == "t":
            elements.append(_parse_element(nested, source))
        else:
            raise IllegalLineTypeError(
                f"Illegal nested line in element (tag) definition {xml_name}: {nested.kind}",
                nested.line_number,
            )
        nested = _read_definition(source)

    if elements and enum_values:
        raise StructuralConflictError(
            f"Nested tags and nested enum values detected for element (tag) definition: {xml_name}",
            definition.line_number,
        )

    if elements:
        rv = ComplexElement(xml_name, cbor_name)
        for element in elements:
            rv.add_nested_element(element)
    elif enum_values:
        rv = EnumValueElement(xml_name, cbor_name)
        for xml_value, cbor_value in enum_values.items():
            rv.add_enum_value(xml_value, cbor_value)
    else:
        rv = SimpleElement(xml_name, cbor_name)

    for attribute in attributes:
        rv.add_attribute(attribute)

    return rv


def _parse_attribute(definition: DefinitionLine, source: LineSource) -> SimpleAttribute:
    """Parse an attribute line and, if it opens a block, its enum values."""
    xml_name = definition.name
    cbor_name = _token_of(definition)

    if not definition.opens_block:
        return SimpleAttribute(xml_name, cbor_name)

    enum_values: Dict[str, NameToken] = {}

    nested = _read_definition(source)
    while nested is not None:
        if nested.kind != "e":
            raise IllegalLineTypeError(
                f"Illegal nested line in attribute definition {xml_name}: {nested.kind}",
                nested.line_number,
            )
        enum_values[nested.name] = _token_of(nested)
        nested = _read_definition(source)

    if not enum_values:
        return SimpleAttribute(xml_name, cbor_name)

    rv = EnumValueAttribute(xml_name, cbor_name)
    for xml_value, cbor_value in enum_values.items():
        rv.add_enum_value(xml_value, cbor_value)
    return rv


def parse_dictionary_lines(lines: Iterable, encoding: str = "utf-8") -> List[Namespace]:
    """
    Parse a dictionary description into Namespace objects.

    Args:
        lines: Any iterable of str or bytes lines
        encoding: Used to decode bytes lines

    Returns:
        Namespaces in source order

    Raises:
        DictionaryParseError: At the first malformed definition
        DictionarySourceError: If reading ``lines`` fails
    """
    if lines is None:
        raise ValueError("Dictionary source must not be None")

    source = LineSource(lines, encoding=encoding)
    namespaces = []

    line = source.next_line()
    while line is not None:
        definition = _match_line(line, source.line_number)
        namespaces.append(_parse_namespace(definition, source))
        line = source.next_line()

    return namespaces


def parse_dictionary_string(text: str) -> List[Namespace]:
    """Parse a dictionary description held in a string."""
    return parse_dictionary_lines(io.StringIO(text, newline=None))


def parse_dictionary_file(filepath, encoding: str = "utf-8") -> List[Namespace]:
    """
    Parse a dictionary description file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        DictionaryParseError: If the description is malformed
        DictionarySourceError: If reading the file fails
    """
    try:
        with open(filepath, "r", encoding=encoding) as f:
            return parse_dictionary_lines(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Dictionary file not found: {filepath}")


__all__ = [
    "parse_dictionary_lines",
    "parse_dictionary_string",
    "parse_dictionary_file",
    "parse_name_token",
    "LineSource",
    "DictionaryParseError",
    "MalformedLineError",
    "IllegalLineTypeError",
    "UnknownCborTypeError",
    "InvalidCborValueError",
    "StructuralConflictError",
    "UnexpectedEofError",
    "DictionarySourceError",
]
