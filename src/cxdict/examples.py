"""
Example dictionaries for demos and tests.

Builds a small IF-MAP style dictionary: one namespace holding a complex
``access-request`` element with an enumerated ``name`` attribute and a
nested ``publish`` element, plus an enumerated ``result`` element.

The same structure is available as description text in EXAMPLE_DESCRIPTION.
"""
from cxdict.dictionary import Dictionary
from cxdict.model import (
    ComplexElement,
    EnumValueAttribute,
    EnumValueElement,
    Namespace,
    SimpleAttribute,
    SimpleElement,
)
from cxdict.tokens import NameToken


EXAMPLE_NAMESPACE = "http://www.trustedcomputinggroup.org/2010/IFMAP/2"

EXAMPLE_DESCRIPTION = """\
n'http://www.trustedcomputinggroup.org/2010/IFMAP/2'[uint(1)] {
    t'access-request'[uint(0)] {
        a'name'[uint(0)] {
            e'enumVal1'[uint(0)]
            e'enumVal2'[uint(1)]
        }
        a'administrative-domain'[uint(1)]
        t'publish'[uint(0)] {
            a'lifetime'[unistr(lt)]
        }
    }
    t'result'[uint(1)] {
        e'success'[bool(true)]
        e'failure'[bool(false)]
    }
}
n'http://www.trustedcomputinggroup.org/2010/IFMAPMETADATA/2'[negint(-1)]
"""


def build_example_dictionary() -> Dictionary:
    """Build the EXAMPLE_DESCRIPTION dictionary programmatically."""
    dictionary = Dictionary()

    namespace = Namespace(EXAMPLE_NAMESPACE, NameToken.uint(1))

    # access-request: complex, with an enum attribute and a nested element
    name_attr = EnumValueAttribute("name", NameToken.uint(0))
    name_attr.add_enum_value("enumVal1", NameToken.uint(0))
    name_attr.add_enum_value("enumVal2", NameToken.uint(1))

    publish = SimpleElement("publish", NameToken.uint(0))
    publish.add_attribute(SimpleAttribute("lifetime", NameToken.unistr("lt")))

    access_request = ComplexElement("access-request", NameToken.uint(0))
    access_request.add_attribute(name_attr)
    access_request.add_attribute(SimpleAttribute("administrative-domain", NameToken.uint(1)))
    access_request.add_nested_element(publish)
    namespace.add_element(access_request)

    # result: enumerated element content
    result = EnumValueElement("result", NameToken.uint(1))
    result.add_enum_value("success", NameToken.boolean(True))
    result.add_enum_value("failure", NameToken.boolean(False))
    namespace.add_element(result)

    dictionary.add_namespace(namespace)
    dictionary.add_namespace(
        Namespace("http://www.trustedcomputinggroup.org/2010/IFMAPMETADATA/2", NameToken.negint(-1))
    )

    return dictionary
