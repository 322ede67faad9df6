"""
Unit tests for namespace.py and header.py

Tests namespace folding, linkage blocks and the top-level header fold.
"""

import unittest

from headerparse.dialects import PLAIN
from headerparse.header import parse_header
from headerparse.models import Path, UsingDeclaration
from headerparse.namespace import parse_namespace
from headerparse.results import ParseContext


def _namespace(text):
    result = parse_namespace(text, 0, ParseContext(PLAIN))
    assert result, f"no namespace in {text!r}: {result}"
    return result.value


def _header(text):
    result = parse_header(text, ParseContext(PLAIN))
    assert result, f"header rejected: {result}"
    return result.value


class TestNamespaces(unittest.TestCase):
    """Test namespace bodies."""

    def test_items_are_collected(self):
        ns = _namespace(
            "namespace a {\n"
            "namespace b { class X {}; }\n"
            "void f();\n"
            "int v;\n"
            "// note\n"
            "}"
        )
        self.assertEqual(ns.name, "a")
        self.assertEqual(ns.namespaces[0].name, "b")
        self.assertEqual(ns.namespaces[0].classes[0].name, "X")
        self.assertEqual([f.name for f in ns.functions], ["f"])
        self.assertEqual([v.name for v in ns.variables], ["v"])
        self.assertEqual(ns.comments, ["note"])

    def test_nested_name_expands(self):
        ns = _namespace("namespace a::b { struct S {}; }")
        self.assertEqual(ns.name, "a")
        (inner,) = ns.namespaces
        self.assertEqual(inner.name, "b")
        self.assertEqual(inner.classes[0].name, "S")

    def test_anonymous_namespace(self):
        ns = _namespace("namespace { int hidden; }")
        self.assertEqual(ns.name, "")
        self.assertEqual(ns.variables[0].name, "hidden")

    def test_inline_namespace(self):
        ns = _namespace("inline namespace v1 { }")
        self.assertTrue(ns.is_inline)

    def test_enums_aliases_and_usings(self):
        ns = _namespace(
            "namespace m { enum class E { A }; using Id = int; using std::swap; }"
        )
        self.assertEqual(ns.enums[0].name, "E")
        self.assertEqual(ns.aliases[0].type, Path(("int",)))
        self.assertEqual(ns.usings, [UsingDeclaration("std::swap")])

    def test_comment_before_nested_namespace(self):
        ns = _namespace("namespace a {\n// inner block\nnamespace b {}\n}")
        self.assertEqual(ns.comments, ["inner block"])
        self.assertEqual(ns.namespaces[0].name, "b")

    def test_comment_before_linkage_block(self):
        ns = _namespace('namespace a {\n// C api\nextern "C" {\n    int c_func(int);\n}\n}')
        self.assertEqual(ns.comments, ["C api"])
        self.assertEqual([f.name for f in ns.functions], ["c_func"])

    def test_namespace_does_not_skip_comments(self):
        self.assertFalse(parse_namespace("// x\nnamespace a {}", 0, ParseContext(PLAIN)))

    def test_unclosed_namespace(self):
        result = parse_namespace("namespace a { int x;", 0, ParseContext(PLAIN))
        self.assertFalse(result)
        self.assertEqual(result.context, ("a",))


class TestHeaderFold(unittest.TestCase):
    """Test the top-level fold."""

    def test_empty_header(self):
        header = _header("")
        self.assertEqual(header.classes, [])
        self.assertEqual(header.includes, [])

    def test_byte_order_mark(self):
        header = _header("\ufeff#include <vector>\n")
        self.assertEqual(header.include_paths, ["vector"])

    def test_mixed_top_level(self):
        header = _header(
            "#pragma once\n"
            "#include <string>\n"
            "#define VERSION 3\n"
            "// Header comment.\n"
            "\n"
            "using namespace std;\n"
            "typedef unsigned int uint;\n"
            "static constexpr int kLimit = 16;\n"
            "class Foo;\n"
            "int add(int a, int b);\n"
            "enum Mode { On, Off };\n"
        )
        self.assertEqual([d.text for d in header.directives], ["pragma once"])
        self.assertEqual([d.text for d in header.defines], ["define VERSION 3"])
        self.assertEqual(header.comments, ["Header comment."])
        self.assertEqual(header.usings[0].target, "std")
        self.assertEqual(header.aliases[0].name, "uint")
        self.assertEqual(header.variables[0].name, "kLimit")
        self.assertTrue(header.classes[0].is_forward_declaration)
        self.assertEqual(header.functions[0].name, "add")
        self.assertEqual(header.enums[0].name, "Mode")

    def test_extern_c_block_is_transparent(self):
        header = _header('extern "C" {\n    int c_func(int);\n    int c_value;\n}\n')
        self.assertEqual([f.name for f in header.functions], ["c_func"])
        self.assertEqual([v.name for v in header.variables], ["c_value"])

    def test_comment_before_function_is_standalone(self):
        header = _header("/// Adds.\nint add(int a, int b);")
        self.assertEqual(header.comments, ["Adds."])
        self.assertIsNone(header.functions[0].comment)

    def test_unknown_construct_fails(self):
        text = "class A {};\n@\n"
        result = parse_header(text, ParseContext(PLAIN))
        self.assertFalse(result)
        self.assertEqual(result.pos, text.index("@"))


if __name__ == "__main__":
    unittest.main()
