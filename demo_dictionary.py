#!/usr/bin/env python3
"""
Dictionary Demo: Description → Dictionary → Lookups → Export

Shows the full workflow:
1. Parse a dictionary description (file argument, or the built-in example)
2. Forward and reverse lookups
3. Dictionary path resolution
4. YAML export and description round trip
"""

import argparse
import logging

from cxdict.dictionary import Dictionary
from cxdict.examples import EXAMPLE_DESCRIPTION, EXAMPLE_NAMESPACE
from cxdict.serialization import dictionary_to_yaml, format_dictionary
from cxdict.tokens import NameToken


def main():
    parser = argparse.ArgumentParser(description='Load a CBOR/XML name dictionary and show lookups')
    parser.add_argument('description', nargs='?', help='Path to a dictionary description file')
    parser.add_argument('--debug', action='store_true', help='Log parser source lines')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    print("=" * 80)
    print("DICTIONARY DEMO: Description → Dictionary → Lookups → Export")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse description
    # =========================================================================
    print("\n1. PARSING DESCRIPTION...")
    dictionary = Dictionary()
    if args.description:
        dictionary.extend_dictionary(args.description)
    else:
        dictionary.extend_from_string(EXAMPLE_DESCRIPTION)
    print(f"   ✓ Namespaces: {len(dictionary)}")
    for name, ns in dictionary.namespaces.items():
        print(f"      - {name} -> {ns.cbor_name} ({len(ns.elements)} elements)")

    if args.description:
        print("\n" + format_dictionary(dictionary))
        return

    # =========================================================================
    # STEP 2: Lookups
    # =========================================================================
    print("\n2. LOOKUPS...")
    ns = dictionary.lookup_namespace(EXAMPLE_NAMESPACE)
    element = ns.lookup_element("access-request")
    print(f"   ✓ access-request -> {element.cbor_name}")
    print(f"   ✓ {NameToken.uint(0)} -> {ns.reverse_lookup_element(NameToken.uint(0)).xml_name}")
    attribute = element.lookup_attribute("name")
    print(f"   ✓ @name='enumVal2' -> {attribute.lookup_enum_value('enumVal2')}")

    # =========================================================================
    # STEP 3: Paths
    # =========================================================================
    print("\n3. DICTIONARY PATHS...")
    for path in (
        f"<{EXAMPLE_NAMESPACE}>access-request",
        f"<{EXAMPLE_NAMESPACE}>access-request+publish",
        f"<{EXAMPLE_NAMESPACE}>access-request+publish@lifetime",
    ):
        if "@" in path:
            found = dictionary.find_attribute_by_path(path)
        else:
            found = dictionary.find_element_by_path(path)
        print(f"   ✓ {path}\n        -> {found!r}")

    # =========================================================================
    # STEP 4: Export
    # =========================================================================
    print("\n4. EXPORT (YAML)...")
    print(dictionary_to_yaml(dictionary))

    print("=" * 80)
    print("Description round trip:")
    print(format_dictionary(dictionary))


if __name__ == "__main__":
    main()
