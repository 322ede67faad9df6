"""Tests for qualified name helpers."""

from __future__ import annotations

import unittest

from core.naming import normalize_cpp_entity_name, qualify, split_qualified_name, strip_template_arguments


class TestNaming(unittest.TestCase):
    def test_normalize_collapses_spacing(self) -> None:
        self.assertEqual(normalize_cpp_entity_name("  a :: b  "), "a::b")
        self.assertEqual(normalize_cpp_entity_name("Foo:: ~Foo"), "Foo::~Foo")
        self.assertEqual(normalize_cpp_entity_name("unsigned   int"), "unsigned int")

    def test_strip_template_arguments(self) -> None:
        self.assertEqual(strip_template_arguments("Foo<Bar<int>>"), "Foo")
        self.assertEqual(strip_template_arguments("ns::Box<T*>::Item"), "ns::Box::Item")

    def test_qualify_skips_anonymous_segments(self) -> None:
        self.assertEqual(qualify(["outer", "", "Inner"], "Leaf"), "outer::Inner::Leaf")
        self.assertEqual(qualify([], "Top"), "Top")

    def test_split_qualified_name(self) -> None:
        self.assertEqual(split_qualified_name("util :: detail"), ["util", "detail"])
        self.assertEqual(split_qualified_name(""), [])


if __name__ == "__main__":
    unittest.main()
