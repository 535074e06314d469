"""
Tests for NameToken values.

These tests verify:
    - Construction and payload validation per variant
    - Equality (variant, payload and tag)
    - Cloning and tag handling
"""

import pytest
from cxdict.tokens import NameToken, TokenType


class TestConstruction:
    """Test variant constructors and payload checks."""

    def test_convenience_constructors(self):
        """Each helper should produce its variant."""
        assert NameToken.uint(1).type is TokenType.UNSIGNED_INT
        assert NameToken.negint(-1).type is TokenType.NEGATIVE_INT
        assert NameToken.double(1.5).type is TokenType.DOUBLE
        assert NameToken.bytestr(b"\x01").type is TokenType.BYTE_STRING
        assert NameToken.unistr("ns").type is TokenType.UNICODE_STRING
        assert NameToken.boolean(False).type is TokenType.BOOL

    def test_type_names_match_description_language(self):
        assert [t.value for t in TokenType] == ["uint", "negint", "double", "bytestr", "unistr", "bool"]

    def test_double_coerces_int(self):
        token = NameToken.double(2)
        assert token.value == 2.0
        assert isinstance(token.value, float)

    def test_bytestr_coerces_bytearray(self):
        token = NameToken.bytestr(bytearray(b"\xad\xfc"))
        assert token.value == b"\xad\xfc"
        assert isinstance(token.value, bytes)

    @pytest.mark.parametrize("factory,value", [
        (NameToken.uint, -1),
        (NameToken.uint, 2 ** 64),
        (NameToken.uint, True),
        (NameToken.uint, "1"),
        (NameToken.negint, 0),
        (NameToken.negint, 5),
        (NameToken.negint, -(2 ** 63) - 1),
        (NameToken.double, "1.0"),
        (NameToken.bytestr, "adfc"),
        (NameToken.unistr, b"ns"),
        (NameToken.boolean, 1),
    ])
    def test_invalid_payload_rejected(self, factory, value):
        with pytest.raises(ValueError):
            factory(value)

    def test_invalid_tag_rejected(self):
        with pytest.raises(ValueError):
            NameToken.uint(1, tag=-1)
        with pytest.raises(ValueError):
            NameToken.uint(1, tag=True)

    def test_token_is_immutable(self):
        token = NameToken.uint(1)
        with pytest.raises(AttributeError):
            token.value = 2


class TestEquality:
    """Tokens compare by variant, payload and tag."""

    def test_same_variant_and_payload_equal(self):
        assert NameToken.uint(7) == NameToken.uint(7)
        assert hash(NameToken.uint(7)) == hash(NameToken.uint(7))

    def test_different_payload_unequal(self):
        assert NameToken.uint(7) != NameToken.uint(8)

    def test_different_variant_unequal(self):
        """uint(1) and bool(True) are different tokens despite 1 == True."""
        assert NameToken.uint(1) != NameToken.boolean(True)
        assert NameToken.uint(0) != NameToken.double(0.0)

    def test_tag_participates_in_equality(self):
        assert NameToken.uint(1, tag=6) != NameToken.uint(1)
        assert NameToken.uint(1, tag=6) == NameToken.uint(1, tag=6)


class TestCloning:
    """Test clone and tag helpers."""

    def test_clone_equal_but_distinct(self):
        token = NameToken.bytestr(b"\xad\xfc\xb3")
        clone = token.clone()
        assert clone == token
        assert clone is not token

    def test_clone_preserves_tag(self):
        token = NameToken.unistr("ns", tag=32)
        clone = token.clone()
        assert clone.tag == 32
        assert clone.has_tag

    def test_without_tag_leaves_original(self):
        token = NameToken.uint(3, tag=1)
        stripped = token.without_tag()
        assert stripped == NameToken.uint(3)
        assert token.tag == 1

    def test_with_tag(self):
        assert NameToken.uint(3).with_tag(2) == NameToken.uint(3, tag=2)

    def test_str(self):
        assert str(NameToken.uint(3)) == "uint(3)"
        assert str(NameToken.bytestr(b"\xad")) == "bytestr(ad)"
        assert str(NameToken.uint(3, tag=1)) == "1:uint(3)"
