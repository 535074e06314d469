"""
Dictionary: root container of a CBOR/XML name dictionary.

A Dictionary owns a set of Namespaces and resolves dictionary paths.

Dictionary path syntax:
    <NAMESPACE>ELEMENT(+ELEMENT)*(@ATTRIBUTE)?

Examples:
    <http://www.trustedcomputinggroup.org/2010/IFMAP/2>publish
    <http://www.trustedcomputinggroup.org/2010/IFMAP/2>publish+update@lifetime

Descriptions are read with cxdict.parser. Parsing a source is atomic:
namespaces are merged into the dictionary only after the whole source
parsed without error.
"""

import io
import logging
import os
import re
from typing import Iterable, Mapping, Optional, Union

from cxdict.model import (
    BidiMap,
    ComplexElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
    cbor_identity,
    check_token,
    put_logged,
)
from cxdict.parser import parse_dictionary_file, parse_dictionary_lines
from cxdict.tokens import NameToken


logger = logging.getLogger(__name__)

FULL_PATH_PATTERN = re.compile(
    r"^<([^<>]+)>"
    r"([a-zA-Z_][\w\-.]*(?:\+[a-zA-Z_][\w\-.]*)*)"
    r"(?:@([a-zA-Z_:][-a-zA-Z0-9_:.]*))?$",
    re.ASCII,
)

DictionarySource = Union[str, os.PathLike, Iterable]


class DictionaryPathError(Exception):
    """Raised when a dictionary path cannot be evaluated."""
    pass


class Dictionary:
    """
    Registry of Namespaces, keyed by XML name and by CBOR name.

    Instances are plain objects: build one at startup and pass it to
    whatever needs it. cxdict.registry offers named sharing if required.

    Not thread-safe for writers; concurrent lookups without writers are fine.
    """

    def __init__(self):
        self._namespaces: BidiMap = BidiMap(cbor_identity)

    @property
    def namespaces(self) -> Mapping[str, Namespace]:
        return self._namespaces.view()

    def __len__(self) -> int:
        return len(self._namespaces)

    def __repr__(self) -> str:
        return f"Dictionary(namespaces={list(self._namespaces)!r})"

    def extend_dictionary(self, source: DictionarySource, encoding: str = "utf-8") -> "Dictionary":
        """
        Parse a dictionary description and merge it into this dictionary.

        Args:
            source: Path to a description file, or an open text/binary
                stream or any iterable of lines
            encoding: File encoding, used when ``source`` is a path

        Returns:
            self

        Raises:
            DictionaryParseError: If the description is malformed; the
                dictionary is left unchanged
            DictionarySourceError: If reading the source fails
        """
        if source is None:
            raise ValueError("Dictionary source must not be None")

        if isinstance(source, (str, os.PathLike)):
            namespaces = parse_dictionary_file(source, encoding=encoding)
        else:
            namespaces = parse_dictionary_lines(source)

        for namespace in namespaces:
            self.add_namespace(namespace)

        logger.debug(f"Merged {len(namespaces)} namespaces, dictionary holds {len(self)}")
        return self

    def extend_from_string(self, text: str) -> "Dictionary":
        """Merge a description given as a string."""
        return self.extend_dictionary(io.StringIO(text, newline=None))

    def replace_dictionary(self, source: DictionarySource, encoding: str = "utf-8") -> "Dictionary":
        """Clear this dictionary, then extend it with ``source``."""
        self.clear()
        return self.extend_dictionary(source, encoding=encoding)

    def lookup_namespace(self, xml_name: str) -> Optional[Namespace]:
        return self._namespaces.get(xml_name)

    def reverse_lookup_namespace(self, cbor_name: NameToken) -> Optional[Namespace]:
        check_token(cbor_name)
        return self._namespaces.get(self._namespaces.get_key(cbor_name))

    def add_namespace(self, namespace: Namespace) -> None:
        if not isinstance(namespace, Namespace):
            raise ValueError(f"Dictionary namespace must be a Namespace, got {namespace!r}")

        put_logged(self._namespaces, namespace.xml_name, namespace, "namespace")

    def remove_namespace(self, xml_name: str) -> None:
        self._namespaces.remove(xml_name)

    def clear(self) -> None:
        self._namespaces.clear()

    def find_element_by_path(self, path: str) -> Optional[SimpleElement]:
        """
        Resolve the element addressed by a dictionary path.

        Args:
            path: Dictionary path, the attribute part is ignored

        Returns:
            The element, or None if any step along the path is missing or
            a non-complex element is asked for nested elements

        Raises:
            DictionaryPathError: If ``path`` is None or not a valid path
        """
        m = _match_path(path)
        namespace, element_path = m.group(1), m.group(2)

        ns_entry = self.lookup_namespace(namespace)
        if ns_entry is None:
            return None

        names = element_path.split("+")
        entry = ns_entry.lookup_element(names[0])

        for name in names[1:]:
            if not isinstance(entry, ComplexElement):
                return None
            entry = entry.lookup_nested_element(name)

        return entry

    def find_attribute_by_path(self, path: str) -> Optional[SimpleAttribute]:
        """
        Resolve the attribute addressed by a dictionary path.

        Returns:
            The attribute, or None if the element or the attribute is missing

        Raises:
            DictionaryPathError: If ``path`` is invalid, or if it resolves
                to an element but names no attribute
        """
        element = self.find_element_by_path(path)
        if element is None:
            return None

        attribute = _match_path(path).group(3)
        if attribute is None:
            raise DictionaryPathError(f"Path specifies no target attribute: {path}")

        return element.lookup_attribute(attribute)


def _match_path(path: str) -> "re.Match":
    if path is None:
        raise DictionaryPathError("Null reference for dictionary path")

    m = FULL_PATH_PATTERN.fullmatch(path)
    if m is None:
        raise DictionaryPathError(f"Cannot evaluate dictionary path: {path}")
    return m

