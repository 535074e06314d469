"""
Serialization helpers for CXDICT objects (Dictionary, Namespace, elements, tokens).

Provides lossless JSON/YAML round-trip via intermediate dict representation,
and renders a Dictionary back into the description language read by
cxdict.parser.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict, List

import yaml

from cxdict.dictionary import Dictionary
from cxdict.model import (
    ComplexElement,
    EnumValueAttribute,
    EnumValueElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
    split_element,
)
from cxdict.tokens import NameToken, TokenType


def token_to_dict(t: NameToken) -> Dict[str, Any]:
    value = t.value.hex() if t.type is TokenType.BYTE_STRING else t.value
    return {"type": t.type.value, "value": value, "tag": t.tag}


def token_from_dict(d: Dict[str, Any]) -> NameToken:
    token_type = TokenType(d["type"])
    value = d["value"]
    if token_type is TokenType.BYTE_STRING:
        value = bytes.fromhex(value)
    return NameToken(token_type, value, d.get("tag"))


def enum_values_to_list(enum_values) -> List[Dict[str, Any]]:
    return [{"xml_value": k, "cbor_value": token_to_dict(v)} for k, v in enum_values.items()]


def attribute_to_dict(a: SimpleAttribute) -> Dict[str, Any]:
    d = {
        "kind": "enum" if a.is_enum_value_attribute else "simple",
        "xml_name": a.xml_name,
        "cbor_name": token_to_dict(a.cbor_name),
    }
    if a.is_enum_value_attribute:
        d["enum_values"] = enum_values_to_list(a.enum_values)
    return d


def attribute_from_dict(d: Dict[str, Any]) -> SimpleAttribute:
    cbor_name = token_from_dict(d["cbor_name"])
    if d.get("kind") == "enum":
        a = EnumValueAttribute(d["xml_name"], cbor_name)
        for ev in d.get("enum_values", []):
            a.add_enum_value(ev["xml_value"], token_from_dict(ev["cbor_value"]))
        return a
    return SimpleAttribute(d["xml_name"], cbor_name)


def element_to_dict(e: SimpleElement) -> Dict[str, Any]:
    kind, children = split_element(e)
    d = {
        "kind": kind,
        "xml_name": e.xml_name,
        "cbor_name": token_to_dict(e.cbor_name),
        "attributes": [attribute_to_dict(a) for a in e.attributes.values()],
    }
    if kind == "complex":
        d["elements"] = [element_to_dict(n) for n in children.values()]
    elif kind == "enum":
        d["enum_values"] = enum_values_to_list(children)
    return d


def element_from_dict(d: Dict[str, Any]) -> SimpleElement:
    cbor_name = token_from_dict(d["cbor_name"])
    kind = d.get("kind", "simple")

    if kind == "complex":
        e = ComplexElement(d["xml_name"], cbor_name)
        for n in d.get("elements", []):
            e.add_nested_element(element_from_dict(n))
    elif kind == "enum":
        e = EnumValueElement(d["xml_name"], cbor_name)
        for ev in d.get("enum_values", []):
            e.add_enum_value(ev["xml_value"], token_from_dict(ev["cbor_value"]))
    elif kind == "simple":
        e = SimpleElement(d["xml_name"], cbor_name)
    else:
        raise TypeError(f"Unsupported element kind: {kind}")

    for a in d.get("attributes", []):
        e.add_attribute(attribute_from_dict(a))
    return e


def namespace_to_dict(ns: Namespace) -> Dict[str, Any]:
    return {
        "xml_name": ns.xml_name,
        "cbor_name": token_to_dict(ns.cbor_name),
        "elements": [element_to_dict(e) for e in ns.elements.values()],
    }


def namespace_from_dict(d: Dict[str, Any]) -> Namespace:
    ns = Namespace(d["xml_name"], token_from_dict(d["cbor_name"]))
    for e in d.get("elements", []):
        ns.add_element(element_from_dict(e))
    return ns


def dictionary_to_dict(dictionary: Dictionary) -> Dict[str, Any]:
    return {"namespaces": [namespace_to_dict(ns) for ns in dictionary.namespaces.values()]}


def dictionary_from_dict(d: Dict[str, Any]) -> Dictionary:
    dictionary = Dictionary()
    for ns in d.get("namespaces", []):
        dictionary.add_namespace(namespace_from_dict(ns))
    return dictionary


def dictionary_to_json(dictionary: Dictionary) -> str:
    return json.dumps(dictionary_to_dict(dictionary), sort_keys=True)


def dictionary_from_json(s: str) -> Dictionary:
    d = json.loads(s)
    return dictionary_from_dict(d)


def dictionary_to_yaml(dictionary: Dictionary) -> str:
    return yaml.safe_dump(dictionary_to_dict(dictionary))


def dictionary_from_yaml(s: str) -> Dictionary:
    d = yaml.safe_load(s)
    return dictionary_from_dict(d)


# =========================================================================
# Description language
# =========================================================================

def _check_expressible(text: str, what: str) -> str:
    if not text.strip():
        raise ValueError(f"Cannot write a blank {what} in a description")
    if "\n" in text or "\r" in text:
        raise ValueError(f"Cannot write a {what} containing a line break in a description: {text!r}")
    return text


def _format_double(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def _format_token(t: NameToken) -> str:
    if t.type is TokenType.BYTE_STRING:
        value = t.value.hex()
    elif t.type is TokenType.BOOL:
        value = "true" if t.value else "false"
    elif t.type is TokenType.DOUBLE:
        value = _format_double(t.value)
    elif t.type is TokenType.UNICODE_STRING:
        value = _check_expressible(t.value, "unistr value")
    else:
        value = str(t.value)
    return f"[{t.type.value}({value})]"


def _definition(kind: str, xml_name: str, t: NameToken) -> str:
    return f"{kind}'{_check_expressible(xml_name, 'name')}'{_format_token(t)}"


def _format_enum_values(enum_values, indent: str) -> List[str]:
    return [indent + _definition("e", k, v) for k, v in enum_values.items()]


def _format_attribute(a: SimpleAttribute, indent: str) -> List[str]:
    head = indent + _definition("a", a.xml_name, a.cbor_name)
    if not a.is_enum_value_attribute or not a.enum_values:
        return [head]
    return [head + " {", *_format_enum_values(a.enum_values, indent + "    "), indent + "}"]


def _format_element(e: SimpleElement, indent: str) -> List[str]:
    head = indent + _definition("t", e.xml_name, e.cbor_name)
    inner = indent + "    "

    kind, children = split_element(e)
    body: List[str] = []
    for a in e.attributes.values():
        body.extend(_format_attribute(a, inner))
    if kind == "complex":
        for n in children.values():
            body.extend(_format_element(n, inner))
    elif kind == "enum":
        body.extend(_format_enum_values(children, inner))

    if not body:
        return [head]
    return [head + " {", *body, indent + "}"]


def format_dictionary(dictionary: Dictionary) -> str:
    """
    Render a Dictionary in the description language.

    Parsing the result rebuilds an equal hierarchy. Token tags cannot be
    expressed in the description language and are dropped, and complex or
    enum elements without children come back as simple elements.

    Raises:
        ValueError: If a name or unistr value is blank or contains a line
            break, since the parser could not read it back
    """
    lines: List[str] = []
    for ns in dictionary.namespaces.values():
        head = _definition("n", ns.xml_name, ns.cbor_name)
        if not ns.elements:
            lines.append(head)
            continue
        lines.append(head + " {")
        for e in ns.elements.values():
            lines.extend(_format_element(e, "    "))
        lines.append("}")
    return "\n".join(lines) + "\n"
