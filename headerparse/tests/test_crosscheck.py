"""
Unit tests for crosscheck.py

Tests the tree-sitter reference outline and its comparison with parsed
headers.
"""

import unittest
from pathlib import Path

from headerparse.crosscheck import (
    OutlineDiff,
    create_reference_parser,
    crosscheck,
    crosscheck_file,
    header_outline,
    reference_outline,
)
from headerparse.models import ClassDecl, Header, NamespaceDecl
from headerparse.parser import parse_text


class TestReferenceOutline(unittest.TestCase):
    """Test the outline computed by tree-sitter."""

    def test_create_reference_parser(self):
        parser = create_reference_parser()
        self.assertIsNotNone(parser.language)

    def test_requires_bytes(self):
        with self.assertRaises(TypeError):
            reference_outline("class A {};")

    def test_classes_and_namespaces(self):
        source = b"""
namespace outer {
class Widget {
    struct Part { int id; };
};
}
struct Free { int x; };
class Forward;
"""
        outline, errors = reference_outline(source)
        self.assertEqual(errors, 0)
        self.assertEqual(
            outline,
            {
                ("namespace", "outer"),
                ("class", "outer::Widget"),
                ("struct", "outer::Widget::Part"),
                ("struct", "Free"),
            },
        )


class TestHeaderOutline(unittest.TestCase):
    """Test the outline computed from a parsed header."""

    def test_forward_declarations_are_skipped(self):
        header = parse_text("class A; namespace n { class B {}; }")
        self.assertEqual(header_outline(header), {("namespace", "n"), ("class", "n::B")})

    def test_anonymous_namespace_adds_no_scope(self):
        header = Header(
            namespaces=[NamespaceDecl(name="", classes=[ClassDecl(name="Hidden")])]
        )
        self.assertEqual(header_outline(header), {("class", "Hidden")})


class TestCrosscheck(unittest.TestCase):
    """Test outline comparison."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_fixture_is_clean(self):
        diff = crosscheck_file(str(self.fixtures_dir / "simple_class.h"))
        self.assertIsInstance(diff, OutlineDiff)
        self.assertEqual(diff.missing, [])
        self.assertEqual(diff.unexpected, [])
        self.assertTrue(diff.is_clean)

    def test_missing_and_unexpected(self):
        source = b"class A {}; class B {};"
        header = Header(classes=[ClassDecl(name="A"), ClassDecl(name="C")])
        diff = crosscheck(source, header)
        self.assertEqual(diff.missing, [("class", "B")])
        self.assertEqual(diff.unexpected, [("class", "C")])
        self.assertFalse(diff.is_clean)


if __name__ == "__main__":
    unittest.main()
