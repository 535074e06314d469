"""
Tests for CXDICT Core Model Objects

These tests verify:
    - Entity creation and argument checks
    - Identity rules (CBOR name only)
    - Forward/reverse lookups at every container level
    - Collision handling (overwrite + warning, never an error)
    - The namespace element tag quirk
"""

import logging
from dataclasses import FrozenInstanceError

import pytest
from cxdict.model import (
    BidiMap,
    ComplexElement,
    EnumValueAttribute,
    EnumValueElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
)
from cxdict.tokens import NameToken


class TestBidiMap:
    """Test the bidirectional map underlying every container."""

    def test_put_and_get_both_ways(self):
        bidi = BidiMap()
        bidi.put("a", NameToken.uint(0))
        assert bidi.get("a") == NameToken.uint(0)
        assert bidi.get_key(NameToken.uint(0)) == "a"

    def test_put_same_key_replaces_value(self):
        bidi = BidiMap()
        bidi.put("a", NameToken.uint(0))
        prev = bidi.put("a", NameToken.uint(1))
        assert prev == NameToken.uint(0)
        assert bidi.get_key(NameToken.uint(0)) is None
        assert len(bidi) == 1

    def test_put_same_value_evicts_old_key(self):
        bidi = BidiMap()
        bidi.put("a", NameToken.uint(0))
        bidi.put("b", NameToken.uint(0))
        assert "a" not in bidi
        assert bidi.get_key(NameToken.uint(0)) == "b"

    def test_remove_and_remove_value(self):
        bidi = BidiMap()
        bidi.put("a", NameToken.uint(0))
        bidi.put("b", NameToken.uint(1))
        bidi.remove("a")
        bidi.remove_value(NameToken.uint(1))
        assert len(bidi) == 0
        assert bidi.remove("missing") is None

    def test_view_is_read_only(self):
        bidi = BidiMap()
        bidi.put("a", NameToken.uint(0))
        with pytest.raises(TypeError):
            bidi.view()["b"] = NameToken.uint(1)


class TestSimpleAttribute:
    """Test SimpleAttribute objects."""

    def test_create_attribute(self):
        attr = SimpleAttribute("name", NameToken.uint(0))
        assert attr.xml_name == "name"
        assert attr.cbor_name == NameToken.uint(0)
        assert not attr.is_enum_value_attribute

    @pytest.mark.parametrize("xml_name", ["", "   ", None])
    def test_blank_xml_name_rejected(self, xml_name):
        with pytest.raises(ValueError):
            SimpleAttribute(xml_name, NameToken.uint(0))

    def test_missing_cbor_name_rejected(self):
        with pytest.raises(ValueError):
            SimpleAttribute("name", None)

    def test_equality_by_cbor_name_only(self):
        """Same CBOR name, different XML name: equal."""
        a = SimpleAttribute("name", NameToken.uint(0))
        b = SimpleAttribute("other", NameToken.uint(0))
        assert a == b
        assert hash(a) == hash(b)

    def test_different_cbor_name_unequal(self):
        a = SimpleAttribute("name", NameToken.uint(0))
        b = SimpleAttribute("name", NameToken.uint(1))
        assert a != b

    def test_attribute_is_immutable(self):
        attr = SimpleAttribute("name", NameToken.uint(0))
        with pytest.raises(FrozenInstanceError):
            attr.xml_name = "other"


class TestEnumValues:
    """Enum value maps on attributes and elements."""

    @pytest.fixture(params=[EnumValueAttribute, EnumValueElement])
    def entity(self, request):
        entity = request.param("name", NameToken.uint(0))
        entity.add_enum_value("v1", NameToken.uint(0))
        entity.add_enum_value("v2", NameToken.uint(1))
        return entity

    def test_forward_lookup(self, entity):
        assert entity.lookup_enum_value("v1") == NameToken.uint(0)
        assert entity.lookup_enum_value("v2") == NameToken.uint(1)

    def test_reverse_lookup(self, entity):
        assert entity.reverse_lookup_enum_value(NameToken.uint(0)) == "v1"
        assert entity.reverse_lookup_enum_value(NameToken.uint(1)) == "v2"

    def test_missing_returns_none(self, entity):
        assert entity.lookup_enum_value("v3") is None
        assert entity.reverse_lookup_enum_value(NameToken.uint(9)) is None

    def test_lookup_returns_copy(self, entity):
        assert entity.lookup_enum_value("v1") is not entity.enum_values["v1"]

    def test_reverse_lookup_respects_tags(self, entity):
        assert entity.reverse_lookup_enum_value(NameToken.uint(0, tag=1)) is None

    def test_remove_by_name_and_token(self, entity):
        entity.remove_enum_value("v1")
        entity.remove_enum_value_by_token(NameToken.uint(1))
        entity.remove_enum_value("absent")
        assert len(entity.enum_values) == 0
        assert entity.reverse_lookup_enum_value(NameToken.uint(0)) is None

    def test_blank_value_rejected(self, entity):
        with pytest.raises(ValueError):
            entity.add_enum_value(" ", NameToken.uint(5))
        with pytest.raises(ValueError):
            entity.add_enum_value("v5", None)

    def test_duplicate_cbor_value_overwrites_with_warning(self, entity, caplog):
        with caplog.at_level(logging.WARNING, logger="cxdict.model"):
            entity.add_enum_value("v3", NameToken.uint(0))

        assert entity.lookup_enum_value("v1") is None
        assert entity.reverse_lookup_enum_value(NameToken.uint(0)) == "v3"
        assert "same CBOR mapping" in caplog.text

    def test_capability_flags(self):
        assert EnumValueAttribute("a", NameToken.uint(0)).is_enum_value_attribute
        element = EnumValueElement("e", NameToken.uint(0))
        assert element.is_enum_value_element
        assert not element.is_complex_element


class TestSimpleElement:
    """Test SimpleElement objects and their attributes."""

    def test_add_and_lookup_attribute(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        attr = SimpleAttribute("name", NameToken.uint(0))
        element.add_attribute(attr)

        assert element.lookup_attribute("name") == attr
        assert element.reverse_lookup_attribute(NameToken.uint(0)) == attr
        assert element.reverse_lookup_attribute(NameToken.uint(0)).xml_name == "name"

    def test_missing_attribute_returns_none(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        assert element.lookup_attribute("name") is None
        assert element.reverse_lookup_attribute(NameToken.uint(0)) is None

    def test_add_none_rejected(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        with pytest.raises(ValueError):
            element.add_attribute(None)

    def test_reverse_lookup_none_rejected(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        with pytest.raises(ValueError):
            element.reverse_lookup_attribute(None)

    def test_remove_attribute(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        element.add_attribute(SimpleAttribute("name", NameToken.uint(0)))
        element.remove_attribute("name")
        element.remove_attribute("name")

        assert element.lookup_attribute("name") is None
        assert element.reverse_lookup_attribute(NameToken.uint(0)) is None

    def test_same_name_overwrites_with_warning(self, caplog):
        element = SimpleElement("access-request", NameToken.uint(0))
        element.add_attribute(SimpleAttribute("name", NameToken.uint(0)))

        with caplog.at_level(logging.WARNING, logger="cxdict.model"):
            element.add_attribute(SimpleAttribute("name", NameToken.uint(1)))

        assert element.lookup_attribute("name").cbor_name == NameToken.uint(1)
        assert element.reverse_lookup_attribute(NameToken.uint(0)) is None
        assert "Previous attribute mapping overridden" in caplog.text

    def test_same_cbor_name_evicts_old_attribute(self, caplog):
        element = SimpleElement("access-request", NameToken.uint(0))
        element.add_attribute(SimpleAttribute("name", NameToken.uint(0)))

        with caplog.at_level(logging.WARNING, logger="cxdict.model"):
            element.add_attribute(SimpleAttribute("other", NameToken.uint(0)))

        assert element.lookup_attribute("name") is None
        assert element.reverse_lookup_attribute(NameToken.uint(0)).xml_name == "other"
        assert "Two attributes with same CBOR mapping" in caplog.text

    def test_reverse_lookup_does_not_strip_tags(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        element.add_attribute(SimpleAttribute("name", NameToken.uint(0)))
        assert element.reverse_lookup_attribute(NameToken.uint(0, tag=3)) is None

    def test_attributes_view_is_read_only(self):
        element = SimpleElement("access-request", NameToken.uint(0))
        with pytest.raises(TypeError):
            element.attributes["name"] = SimpleAttribute("name", NameToken.uint(0))

    def test_equality_across_variants(self):
        """Element identity ignores the variant and the XML name."""
        simple = SimpleElement("a", NameToken.uint(0))
        complex_ = ComplexElement("b", NameToken.uint(0))
        enum = EnumValueElement("c", NameToken.uint(0))
        assert simple == complex_ == enum
        assert SimpleElement("a", NameToken.uint(0)) != SimpleElement("a", NameToken.uint(1))

    def test_element_never_equals_attribute(self):
        assert SimpleElement("a", NameToken.uint(0)) != SimpleAttribute("a", NameToken.uint(0))

    def test_capability_flags(self):
        element = SimpleElement("a", NameToken.uint(0))
        assert not element.is_enum_value_element
        assert not element.is_complex_element
        assert ComplexElement("a", NameToken.uint(0)).is_complex_element


class TestComplexElement:
    """Test nested elements."""

    def test_add_and_lookup_nested(self):
        parent = ComplexElement("access-request", NameToken.uint(0))
        child = SimpleElement("publish", NameToken.uint(0))
        parent.add_nested_element(child)

        assert parent.lookup_nested_element("publish") == child
        assert parent.reverse_lookup_nested_element(NameToken.uint(0)).xml_name == "publish"

    def test_nested_complex_elements(self):
        outer = ComplexElement("outer", NameToken.uint(0))
        middle = ComplexElement("middle", NameToken.uint(1))
        inner = SimpleElement("inner", NameToken.uint(2))
        middle.add_nested_element(inner)
        outer.add_nested_element(middle)

        assert outer.lookup_nested_element("middle").lookup_nested_element("inner") is inner

    def test_missing_and_removed(self):
        parent = ComplexElement("access-request", NameToken.uint(0))
        parent.add_nested_element(SimpleElement("publish", NameToken.uint(0)))
        parent.remove_nested_element("publish")
        parent.remove_nested_element("publish")

        assert parent.lookup_nested_element("publish") is None
        assert parent.reverse_lookup_nested_element(NameToken.uint(0)) is None

    def test_add_none_rejected(self):
        parent = ComplexElement("access-request", NameToken.uint(0))
        with pytest.raises(ValueError):
            parent.add_nested_element(None)

    def test_reverse_lookup_does_not_strip_tags(self):
        parent = ComplexElement("access-request", NameToken.uint(0))
        parent.add_nested_element(SimpleElement("publish", NameToken.uint(0)))
        assert parent.reverse_lookup_nested_element(NameToken.uint(0, tag=3)) is None

    def test_complex_element_keeps_attributes(self):
        parent = ComplexElement("access-request", NameToken.uint(0))
        parent.add_attribute(SimpleAttribute("name", NameToken.uint(0)))
        assert parent.lookup_attribute("name") is not None


class TestNamespace:
    """Test Namespace objects."""

    def test_add_and_lookup_element(self):
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        element = ComplexElement("access-request", NameToken.uint(0))
        ns.add_element(element)

        assert ns.lookup_element("access-request") is element
        assert ns.reverse_lookup_element(NameToken.uint(0)) is element

    def test_missing_and_removed(self):
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        ns.add_element(SimpleElement("publish", NameToken.uint(0)))
        ns.remove_element("publish")
        ns.remove_element("publish")

        assert ns.lookup_element("publish") is None
        assert ns.reverse_lookup_element(NameToken.uint(0)) is None

    def test_add_none_rejected(self):
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        with pytest.raises(ValueError):
            ns.add_element(None)
        with pytest.raises(ValueError):
            ns.add_element(SimpleAttribute("name", NameToken.uint(0)))

    def test_blank_xml_name_rejected(self):
        with pytest.raises(ValueError):
            Namespace(" ", NameToken.uint(1))

    def test_equality_by_cbor_name_only(self):
        assert Namespace("a", NameToken.uint(1)) == Namespace("b", NameToken.uint(1))
        assert Namespace("a", NameToken.uint(1)) != Namespace("a", NameToken.uint(2))

    def test_reverse_lookup_ignores_query_tag(self):
        """Element reverse lookup in a namespace probes with the untagged token."""
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        ns.add_element(SimpleElement("publish", NameToken.uint(0)))

        query = NameToken.uint(0, tag=27)
        assert ns.reverse_lookup_element(query).xml_name == "publish"
        assert query.tag == 27

    def test_reverse_lookup_misses_tagged_entries(self):
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        ns.add_element(SimpleElement("publish", NameToken.uint(0, tag=27)))

        assert ns.lookup_element("publish") is not None
        assert ns.reverse_lookup_element(NameToken.uint(0, tag=27)) is None

    def test_round_trip_every_token_type(self):
        ns = Namespace("http://example.org/ns", NameToken.uint(1))
        tokens = [
            NameToken.uint(2 ** 64 - 1),
            NameToken.negint(-5),
            NameToken.double(1.11),
            NameToken.bytestr(b"\xad\xfc\xb3"),
            NameToken.unistr("pub"),
            NameToken.boolean(True),
        ]
        for i, token in enumerate(tokens):
            ns.add_element(SimpleElement(f"e{i}", token))

        for i, token in enumerate(tokens):
            assert ns.lookup_element(f"e{i}").cbor_name == token
            assert ns.reverse_lookup_element(token).xml_name == f"e{i}"
