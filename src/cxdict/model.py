"""
Core Dictionary Model Objects

Defines the entity hierarchy of a CBOR/XML name dictionary:
    - Attributes (plain and enumerated)
    - Elements (plain, enumerated and complex)
    - Namespaces (root entries of a Dictionary)

Every container keeps its children in a BidiMap:
    forward: XML name  -> child
    reverse: CBOR name -> XML name

ARCHITECTURAL RULE:
    Identity of an entity is its CBOR name.
    The XML name is the forward key and plays no part in equality.
    This lets a bare NameToken act as the probe for a reverse lookup.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Generic, Hashable, Iterator, Mapping, Optional, Tuple, TypeVar

from cxdict.tokens import NameToken


logger = logging.getLogger(__name__)

V = TypeVar("V")


def _same(value):
    return value


class BidiMap(Generic[V]):
    """
    Bidirectional map from XML names to values.

    The reverse side is keyed by ``identity(value)``. Both sides stay unique:
    putting a key or an identity that already exists evicts the older
    mapping on both sides.
    """

    def __init__(self, identity: Callable[[V], Hashable] = _same):
        self.identity = identity
        self._forward: Dict[str, V] = {}
        self._reverse: Dict[Hashable, str] = {}

    def get(self, key: str) -> Optional[V]:
        return self._forward.get(key)

    def get_key(self, identity: Hashable) -> Optional[str]:
        return self._reverse.get(identity)

    def put(self, key: str, value: V) -> Optional[V]:
        """Insert a mapping and return the value previously stored under ``key``."""
        ident = self.identity(value)

        prev = self._forward.pop(key, None)
        if prev is not None:
            self._reverse.pop(self.identity(prev), None)

        old_key = self._reverse.pop(ident, None)
        if old_key is not None:
            self._forward.pop(old_key, None)

        self._forward[key] = value
        self._reverse[ident] = key
        return prev

    def remove(self, key: str) -> Optional[V]:
        value = self._forward.pop(key, None)
        if value is not None:
            self._reverse.pop(self.identity(value), None)
        return value

    def remove_value(self, identity: Hashable) -> Optional[str]:
        key = self._reverse.pop(identity, None)
        if key is not None:
            self._forward.pop(key, None)
        return key

    def clear(self) -> None:
        self._forward.clear()
        self._reverse.clear()

    def items(self):
        return self._forward.items()

    def values(self):
        return self._forward.values()

    def view(self) -> Mapping[str, V]:
        """Read-only view of the forward side."""
        return MappingProxyType(self._forward)

    def __len__(self) -> int:
        return len(self._forward)

    def __contains__(self, key) -> bool:
        return key in self._forward

    def __iter__(self) -> Iterator[str]:
        return iter(self._forward)

    def __repr__(self) -> str:
        return f"BidiMap({self._forward!r})"


def _check_names(xml_name: str, cbor_name: NameToken) -> None:
    if not isinstance(xml_name, str) or not xml_name.strip():
        raise ValueError("XML name must not be blank")
    check_token(cbor_name)


def check_token(cbor_name: NameToken, what: str = "CBOR name") -> None:
    if not isinstance(cbor_name, NameToken):
        raise ValueError(f"{what} must be a NameToken, got {cbor_name!r}")


def cbor_identity(entity) -> NameToken:
    return entity.cbor_name


def put_logged(bidi: BidiMap, key: str, value, what: str) -> None:
    """Put into ``bidi`` and report overwritten mappings as warnings."""
    prev_key = bidi.get_key(bidi.identity(value))
    prev = bidi.put(key, value)

    if prev_key is not None:
        logger.warning(f"Two {what}s with same CBOR mapping: old: {prev_key}, new: {key}")
    if prev is not None:
        logger.warning(f"Previous {what} mapping overridden: {key}, {what}: {prev!r}")


class EnumValueMixin:
    """
    Enum value operations shared by EnumValueAttribute and EnumValueElement.

    Maps XML values (text) to CBOR values (NameToken), unique on both sides.
    """

    _enum_values: BidiMap

    @property
    def enum_values(self) -> Mapping[str, NameToken]:
        return self._enum_values.view()

    def lookup_enum_value(self, xml_value: str) -> Optional[NameToken]:
        """
        Forward lookup of an enum value.

        Returns:
            A copy of the CBOR value, or None if ``xml_value`` is unknown
        """
        rv = self._enum_values.get(xml_value)
        logger.debug(f"Enum value forward lookup in {self.xml_name}: {xml_value} -> {rv}")
        return rv.clone() if rv is not None else None

    def reverse_lookup_enum_value(self, cbor_value: NameToken) -> Optional[str]:
        """
        Reverse lookup of an enum value.

        Returns:
            The XML value, or None if ``cbor_value`` is unknown
        """
        check_token(cbor_value, "CBOR value")
        rv = self._enum_values.get_key(cbor_value)
        logger.debug(f"Enum value reverse lookup in {self.xml_name}: {cbor_value} -> {rv}")
        return rv

    def add_enum_value(self, xml_value: str, cbor_value: NameToken) -> None:
        if not isinstance(xml_value, str) or not xml_value.strip():
            raise ValueError("XML value must not be blank")
        check_token(cbor_value, "CBOR value")

        put_logged(self._enum_values, xml_value, cbor_value, "enum value")

    def remove_enum_value(self, xml_value: str) -> None:
        self._enum_values.remove(xml_value)

    def remove_enum_value_by_token(self, cbor_value: NameToken) -> None:
        self._enum_values.remove_value(cbor_value)


@dataclass(eq=False, frozen=True)
class SimpleAttribute:
    """
    Maps an XML attribute name to a CBOR name.

    Properties:
        xml_name: Attribute name as it appears in XML (non-blank)
        cbor_name: NameToken emitted instead of the name

    Two attributes are equal if their CBOR names are equal.
    """

    xml_name: str
    cbor_name: NameToken

    def __post_init__(self):
        _check_names(self.xml_name, self.cbor_name)

    @property
    def is_enum_value_attribute(self) -> bool:
        return isinstance(self, EnumValueAttribute)

    def __eq__(self, other):
        if not isinstance(other, SimpleAttribute):
            return NotImplemented
        return self.cbor_name == other.cbor_name

    def __hash__(self):
        return hash(self.cbor_name)


@dataclass(eq=False, frozen=True)
class EnumValueAttribute(EnumValueMixin, SimpleAttribute):
    """An attribute whose values are drawn from an enumeration."""

    _enum_values: BidiMap = field(default_factory=BidiMap, init=False, repr=False)


@dataclass(eq=False, frozen=True)
class SimpleElement:
    """
    Maps an XML element name to a CBOR name and owns its attributes.

    Properties:
        xml_name: Element (tag) name as it appears in XML (non-blank)
        cbor_name: NameToken emitted instead of the name

    Two elements of any variant are equal if their CBOR names are equal.
    """

    xml_name: str
    cbor_name: NameToken
    _attributes: BidiMap = field(
        default_factory=lambda: BidiMap(cbor_identity), init=False, repr=False
    )

    def __post_init__(self):
        _check_names(self.xml_name, self.cbor_name)

    @property
    def is_enum_value_element(self) -> bool:
        return isinstance(self, EnumValueElement)

    @property
    def is_complex_element(self) -> bool:
        return isinstance(self, ComplexElement)

    @property
    def attributes(self) -> Mapping[str, SimpleAttribute]:
        return self._attributes.view()

    def lookup_attribute(self, xml_name: str) -> Optional[SimpleAttribute]:
        rv = self._attributes.get(xml_name)
        logger.debug(f"Attribute forward lookup in {self.xml_name}: {xml_name} -> {rv!r}")
        return rv

    def reverse_lookup_attribute(self, cbor_name: NameToken) -> Optional[SimpleAttribute]:
        check_token(cbor_name)
        rv = self._attributes.get(self._attributes.get_key(cbor_name))
        logger.debug(f"Attribute reverse lookup in {self.xml_name}: {cbor_name} -> {rv!r}")
        return rv

    def add_attribute(self, attribute: SimpleAttribute) -> None:
        if not isinstance(attribute, SimpleAttribute):
            raise ValueError(f"Dictionary attribute must be a SimpleAttribute, got {attribute!r}")

        put_logged(self._attributes, attribute.xml_name, attribute, "attribute")

    def remove_attribute(self, xml_name: str) -> None:
        self._attributes.remove(xml_name)

    def __eq__(self, other):
        if not isinstance(other, SimpleElement):
            return NotImplemented
        return self.cbor_name == other.cbor_name

    def __hash__(self):
        return hash(self.cbor_name)


@dataclass(eq=False, frozen=True)
class EnumValueElement(EnumValueMixin, SimpleElement):
    """An element whose text content is drawn from an enumeration."""

    _enum_values: BidiMap = field(default_factory=BidiMap, init=False, repr=False)


@dataclass(eq=False, frozen=True)
class ComplexElement(SimpleElement):
    """
    An element containing nested elements.

    Nested elements may be of any element variant, including ComplexElement.
    """

    _nested_elements: BidiMap = field(
        default_factory=lambda: BidiMap(cbor_identity), init=False, repr=False
    )

    @property
    def nested_elements(self) -> Mapping[str, SimpleElement]:
        return self._nested_elements.view()

    def lookup_nested_element(self, xml_name: str) -> Optional[SimpleElement]:
        rv = self._nested_elements.get(xml_name)
        logger.debug(f"Nested element forward lookup in {self.xml_name}: {xml_name} -> {rv!r}")
        return rv

    def reverse_lookup_nested_element(self, cbor_name: NameToken) -> Optional[SimpleElement]:
        check_token(cbor_name)
        rv = self._nested_elements.get(self._nested_elements.get_key(cbor_name))
        logger.debug(f"Nested element reverse lookup in {self.xml_name}: {cbor_name} -> {rv!r}")
        return rv

    def add_nested_element(self, element: SimpleElement) -> None:
        if not isinstance(element, SimpleElement):
            raise ValueError(f"Dictionary element must be a SimpleElement, got {element!r}")

        put_logged(self._nested_elements, element.xml_name, element, "nested element")

    def remove_nested_element(self, xml_name: str) -> None:
        self._nested_elements.remove(xml_name)


@dataclass(eq=False, frozen=True)
class Namespace:
    """
    Maps an XML namespace to a CBOR name and owns its top-level elements.

    Properties:
        xml_name: Namespace URI or name (non-blank)
        cbor_name: NameToken emitted instead of the namespace

    Two namespaces are equal if their CBOR names are equal.
    """

    xml_name: str
    cbor_name: NameToken
    _elements: BidiMap = field(
        default_factory=lambda: BidiMap(cbor_identity), init=False, repr=False
    )

    def __post_init__(self):
        _check_names(self.xml_name, self.cbor_name)

    @property
    def elements(self) -> Mapping[str, SimpleElement]:
        return self._elements.view()

    def lookup_element(self, xml_name: str) -> Optional[SimpleElement]:
        rv = self._elements.get(xml_name)
        logger.debug(f"Element forward lookup in {self.xml_name}: {xml_name} -> {rv!r}")
        return rv

    def reverse_lookup_element(self, cbor_name: NameToken) -> Optional[SimpleElement]:
        """
        Reverse lookup of a top-level element.

        Unlike every other reverse lookup, the tag of ``cbor_name`` is
        ignored here: the probe is the untagged token. Stored elements
        whose own CBOR name is tagged can therefore not be found this way.
        """
        check_token(cbor_name)
        probe = cbor_name.without_tag()
        rv = self._elements.get(self._elements.get_key(probe))
        logger.debug(f"Element reverse lookup in {self.xml_name}: {cbor_name} -> {rv!r}")
        return rv

    def add_element(self, element: SimpleElement) -> None:
        if not isinstance(element, SimpleElement):
            raise ValueError(f"Dictionary element must be a SimpleElement, got {element!r}")

        put_logged(self._elements, element.xml_name, element, "element")

    def remove_element(self, xml_name: str) -> None:
        self._elements.remove(xml_name)

    def __eq__(self, other):
        if not isinstance(other, Namespace):
            return NotImplemented
        return self.cbor_name == other.cbor_name

    def __hash__(self):
        return hash(self.cbor_name)


def split_element(element: SimpleElement) -> Tuple[str, Mapping]:
    """
    Return the variant name of an element and its variant-specific children.

    ``("complex", nested_elements)``, ``("enum", enum_values)`` or
    ``("simple", {})``.
    """
    if isinstance(element, ComplexElement):
        return "complex", element.nested_elements
    if isinstance(element, EnumValueElement):
        return "enum", element.enum_values
    return "simple", MappingProxyType({})
