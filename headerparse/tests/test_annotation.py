"""
Unit tests for annotation.py and dialects.py

Tests annotation strategies, ignore lines, noise words and dialect loading.
"""

import unittest
from pathlib import Path

from headerparse.annotation import NO_ANNOTATION, MacroAnnotation, collect_annotations, starts_with_macro
from headerparse.dialects import (
    PLAIN,
    REFLECTION,
    MacroLine,
    available_dialects,
    dialect_from_spec,
    get_dialect,
    load_dialect,
)
from core.dialect_config import DialectSpec


class TestAnnotationStrategies(unittest.TestCase):
    """Test the no-op and macro strategies."""

    def test_no_annotation_consumes_nothing(self):
        result = NO_ANNOTATION("UCLASS() class A;", 0)
        self.assertTrue(result)
        self.assertEqual(result.pos, 0)
        self.assertIsNone(result.value)

    def test_macro_with_nested_arguments(self):
        strategy = MacroAnnotation(["UPROPERTY"])
        text = 'UPROPERTY(EditAnywhere, meta=(ClampMin="0, 1"))\nfloat X;'
        result = strategy(text, 0)
        self.assertTrue(result)
        self.assertEqual(result.value.macro, "UPROPERTY")
        self.assertEqual(result.value.text, 'UPROPERTY(EditAnywhere, meta=(ClampMin="0, 1"))')
        self.assertEqual(result.value.specifiers(), ["EditAnywhere", 'meta=(ClampMin="0, 1")'])

    def test_arguments_may_span_lines(self):
        strategy = MacroAnnotation(["UFUNCTION"])
        text = "UFUNCTION(\n    BlueprintCallable,\n    Category = \"AI\"\n)\nvoid Think();"
        result = strategy(text, 0)
        self.assertEqual(result.value.specifiers(), ["BlueprintCallable", 'Category = "AI"'])
        self.assertTrue(text[result.pos :].lstrip().startswith("void"))

    def test_macro_without_arguments(self):
        result = MacroAnnotation(["UPROPERTY"])("UPROPERTY int X;", 0)
        self.assertEqual(result.value.text, "UPROPERTY")
        self.assertEqual(result.value.arguments, "")
        self.assertEqual(result.value.specifiers(), [])

    def test_unknown_macro_fails(self):
        self.assertFalse(MacroAnnotation(["UPROPERTY"])("UFUNCTION() void F();", 0))

    def test_unbalanced_arguments_fail(self):
        self.assertFalse(MacroAnnotation(["UCLASS"])("UCLASS(Blueprintable", 0))


class TestCollectAnnotations(unittest.TestCase):
    """Test repeated application of a strategy."""

    def test_first_annotation_is_kept(self):
        text = "UPROPERTY(A) UPROPERTY(B) int x;"
        result = collect_annotations(text, 0, MacroAnnotation(["UPROPERTY"]))
        self.assertEqual(result.value.text, "UPROPERTY(A)")
        self.assertEqual(text[result.pos :].strip(), "int x;")

    def test_nothing_to_collect(self):
        result = collect_annotations("int x;", 0, MacroAnnotation(["UPROPERTY"]))
        self.assertTrue(result)
        self.assertIsNone(result.value)
        self.assertEqual(result.pos, 0)

    def test_starts_with_macro(self):
        self.assertTrue(starts_with_macro("  UPROPERTY()", 0, REFLECTION.reserved_macros))
        self.assertFalse(starts_with_macro("UPROPERTY()", 0, PLAIN.reserved_macros))
        self.assertFalse(starts_with_macro("int x;", 0, REFLECTION.reserved_macros))


class TestBuiltinDialects(unittest.TestCase):
    """Test the plain and reflection dialect bundles."""

    def test_available(self):
        self.assertEqual(available_dialects(), ("cpp", "unreal"))
        self.assertIs(get_dialect("unreal"), REFLECTION)

    def test_unknown_dialect(self):
        with self.assertRaises(ValueError):
            get_dialect("qt")

    def test_reserved_macros(self):
        for macro in ("UCLASS", "USTRUCT", "UFUNCTION", "UPROPERTY", "UENUM", "UMETA", "UPARAM"):
            self.assertIn(macro, REFLECTION.reserved_macros)
        self.assertEqual(PLAIN.reserved_macros, frozenset())

    def test_generated_body_is_ignored(self):
        text = "GENERATED_BODY()\npublic:"
        result = REFLECTION.ignore_line(text, 0)
        self.assertTrue(result)
        self.assertEqual(result.value, "GENERATED_BODY")
        self.assertEqual(result.pos, len("GENERATED_BODY()"))

    def test_declare_prefix_with_semicolon(self):
        text = "DECLARE_DELEGATE_OneParam(FOnDone, int32);\nclass A;"
        result = REFLECTION.ignore_line(text, 0)
        self.assertEqual(text[result.pos :].strip(), "class A;")

    def test_plain_dialect_ignores_nothing(self):
        self.assertFalse(PLAIN.ignore_line("GENERATED_BODY()", 0))

    def test_skip_words(self):
        self.assertEqual(REFLECTION.skip_word("ENGINE_API void F();", 0), len("ENGINE_API"))
        self.assertEqual(REFLECTION.skip_word("UE_DEPRECATED(5.1, \"x\") void F();", 0), len('UE_DEPRECATED(5.1, "x")'))
        self.assertIsNone(REFLECTION.skip_word("void F();", 0))
        self.assertIsNone(PLAIN.skip_word("ENGINE_API void F();", 0))

    def test_macro_line_prefixes(self):
        line = MacroLine(names=["MY_BODY"], prefixes=["MY_DECLARE_"])
        self.assertTrue(line.matches("MY_BODY"))
        self.assertTrue(line.matches("MY_DECLARE_EVENT"))
        self.assertFalse(line.matches("MY_BODY_EXTRA"))


class TestLoadedDialects(unittest.TestCase):
    """Test dialects built from definitions."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_spec_extends_base(self):
        dialect = dialect_from_spec(
            DialectSpec(name="game", base="unreal", class_macros=("GCLASS",))
        )
        self.assertIn("GCLASS", dialect.class_annotation.macros)
        self.assertIn("UCLASS", dialect.class_annotation.macros)
        self.assertEqual(dialect.ignore, REFLECTION.ignore)

    def test_spec_without_base_starts_plain(self):
        dialect = dialect_from_spec(DialectSpec(name="bare", property_macros=("PROP",)))
        self.assertIs(dialect.class_annotation, NO_ANNOTATION)
        self.assertEqual(dialect.reserved_macros, frozenset({"PROP"}))

    def test_unknown_base(self):
        with self.assertRaises(ValueError):
            dialect_from_spec(DialectSpec(name="x", base="missing"))

    def test_load_yaml_dialect(self):
        dialect = load_dialect(str(self.fixtures_dir / "game_dialect.yml"))
        self.assertEqual(dialect.name, "game")
        self.assertIn("GPROPERTY", dialect.reserved_macros)
        self.assertIn("_EXPORT", dialect.skip_word_suffixes)
        self.assertIn("_API", dialect.skip_word_suffixes)
        self.assertTrue(dialect.ignore_line("GAME_BODY()", 0))
        self.assertTrue(dialect.ignore_line("GENERATED_BODY()", 0))


if __name__ == "__main__":
    unittest.main()
