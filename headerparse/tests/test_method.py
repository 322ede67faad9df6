"""
Unit tests for method.py

Tests function signatures in both declarator styles, operators,
qualifiers, special members and bodies.
"""

import unittest

from headerparse.dialects import PLAIN, REFLECTION
from headerparse.method import parse_method, parse_parameters
from headerparse.models import (
    Const,
    Function,
    Generic,
    Path,
    Pointer,
    PostQualifier,
    Reference,
    SpecialMember,
    StorageQualifier,
)
from headerparse.results import ParseContext


def _method(text, dialect=PLAIN):
    result = parse_method(text, 0, ParseContext(dialect))
    assert result, f"no method in {text!r}: {result}"
    return result.value


class TestReturnTypes(unittest.TestCase):
    """Test return type handling."""

    def test_void_has_no_return_type(self):
        method = _method("void f();")
        self.assertEqual(method.name, "f")
        self.assertIsNone(method.return_type)

    def test_constructor_has_no_return_type(self):
        method = _method("C();")
        self.assertEqual(method.name, "C")
        self.assertIsNone(method.return_type)

    def test_void_pointer_is_kept(self):
        self.assertEqual(_method("void* data();").return_type, Pointer(Path(("void",))))

    def test_trailing_return_type(self):
        method = _method("auto f(int* a) -> int** final;")
        self.assertEqual(method.return_type, Pointer(Pointer(Path(("int",)))))
        self.assertEqual(method.qualifiers, (PostQualifier.FINAL,))
        self.assertEqual(method.parameters[0].type, Pointer(Path(("int",))))
        self.assertEqual(method.parameters[0].name, "a")

    def test_generic_return_type(self):
        method = _method("std::function<int(int)>& get(int);")
        int_t = Path(("int",))
        self.assertEqual(
            method.return_type,
            Reference(Generic(Path(("std", "function")), (Function(int_t, (int_t,)),))),
        )
        self.assertEqual(method.parameters[0].type, int_t)
        self.assertIsNone(method.parameters[0].name)


class TestNames(unittest.TestCase):
    """Test destructors, operators and qualified names."""

    def test_virtual_destructor(self):
        method = _method("virtual ~Shape() = default;")
        self.assertEqual(method.name, "~Shape")
        self.assertTrue(method.is_destructor)
        self.assertTrue(method.is_virtual)
        self.assertEqual(method.special, SpecialMember.DEFAULTED)

    def test_comparison_operator(self):
        method = _method("bool operator==(const Foo& other) const;")
        self.assertEqual(method.name, "operator==")
        self.assertTrue(method.is_operator)
        self.assertEqual(method.parameters[0].type, Reference(Const(Path(("Foo",)))))

    def test_deleted_assignment(self):
        method = _method("Foo& operator=(Foo&&) = delete;")
        self.assertEqual(method.name, "operator=")
        self.assertEqual(method.special, SpecialMember.DELETED)
        self.assertEqual(method.parameters[0].type, Reference(Reference(Path(("Foo",)))))

    def test_call_and_subscript_operators(self):
        self.assertEqual(_method("int operator()(int x) const;").name, "operator()")
        self.assertEqual(_method("T& operator[](std::size_t index);").name, "operator[]")

    def test_allocation_operators(self):
        self.assertEqual(_method("void* operator new(std::size_t size);").name, "operator new")
        self.assertEqual(_method("void operator delete[](void* p);").name, "operator delete[]")

    def test_conversion_operator(self):
        method = _method("explicit operator bool() const;")
        self.assertEqual(method.name, "operator bool")
        self.assertEqual(method.storage, (StorageQualifier.EXPLICIT,))
        self.assertIsNone(method.return_type)

    def test_out_of_line_destructor(self):
        self.assertEqual(_method("Foo::~Foo() {}").name, "Foo::~Foo")

    def test_qualified_definition(self):
        method = _method("int Foo::Bar::get() const { return 1; }")
        self.assertEqual(method.name, "Foo::Bar::get")
        self.assertTrue(method.has_body)


class TestParameters(unittest.TestCase):
    """Test parameter lists."""

    def test_void_parameter_list(self):
        self.assertEqual(_method("void f(void);").parameters, ())

    def test_defaults(self):
        method = _method('void f(int a = 0, const char* s = "x", EMode m = EMode::Fast);')
        defaults = [str(param.default) for param in method.parameters]
        self.assertEqual(defaults, ["0", '"x"', "EMode::Fast"])

    def test_c_variadic(self):
        method = _method("int printf(const char* fmt, ...);")
        self.assertEqual(len(method.parameters), 2)
        self.assertTrue(method.parameters[1].variadic)

    def test_pack_expansion(self):
        method = _method("template<typename... Args> void emit(Args&&... args);")
        param = method.parameters[0]
        self.assertTrue(param.variadic)
        self.assertEqual(param.name, "args")
        self.assertEqual(len(method.template_parameters), 1)

    def test_function_pointer_parameter(self):
        method = _method("void on(void (*handler)(int));")
        self.assertEqual(method.parameters[0].name, "handler")
        self.assertEqual(
            method.parameters[0].type, Function(Path(("void",)), (Path(("int",)),))
        )

    def test_bad_parameter_list_fails_at_token(self):
        text = "void f(int a b);"
        result = parse_method(text, 0, ParseContext(PLAIN))
        self.assertFalse(result)
        self.assertEqual(result.pos, text.index("b)"))
        self.assertIn("',' or ')'", result.expected)

    def test_parameters_need_parenthesis(self):
        self.assertFalse(parse_parameters("int x", 0, ParseContext(PLAIN)))


class TestQualifiersAndBodies(unittest.TestCase):
    """Test trailing qualifiers, special members and bodies."""

    def test_pure_virtual(self):
        method = _method("virtual void Tick() = 0;")
        self.assertTrue(method.is_pure_virtual)
        self.assertFalse(method.has_body)

    def test_noexcept_with_argument(self):
        method = _method("virtual void f() const noexcept(false) override;")
        self.assertEqual(
            method.qualifiers,
            (PostQualifier.CONST, PostQualifier.NOEXCEPT, PostQualifier.OVERRIDE),
        )

    def test_ref_qualifier_and_throw(self):
        method = _method("int value() const & throw();")
        self.assertTrue(method.is_const)

    def test_inline_body(self):
        text = "int get() const { return (x_ > 0) ? x_ : -1; }\nint y;"
        result = parse_method(text, 0, ParseContext(PLAIN))
        self.assertTrue(result.value.has_body)
        self.assertEqual(text[result.pos :], "\nint y;")

    def test_constructor_initializer_list(self):
        method = _method("explicit Circle(double radius) : Shape(), radius_{radius} {}")
        self.assertEqual(method.name, "Circle")
        self.assertTrue(method.has_body)
        self.assertEqual(method.parameters[0].name, "radius")

    def test_semicolon_required(self):
        result = parse_method("void f() int", 0, ParseContext(PLAIN))
        self.assertFalse(result)
        self.assertIn("';' or function body", result.expected)

    def test_member_is_not_a_method(self):
        self.assertFalse(parse_method("int x;", 0, ParseContext(PLAIN)))

    def test_static_attribute_storage(self):
        method = _method("[[nodiscard]] static constexpr int size() noexcept;")
        self.assertEqual(method.storage, (StorageQualifier.STATIC, StorageQualifier.CONSTEXPR))
        self.assertTrue(method.is_static)

    def test_signature(self):
        method = _method("virtual int add(int a, int b) const;")
        self.assertEqual(method.signature(), "virtual int add(int a, int b) const")


class TestReflectedMethods(unittest.TestCase):
    """Test methods under the reflection dialect."""

    def test_function_annotation_and_param_annotation(self):
        method = _method(
            'UFUNCTION(BlueprintCallable, Category = "Health")\n'
            "void ApplyDamage(float Amount, UPARAM(ref) int32& Hits);",
            REFLECTION,
        )
        self.assertEqual(method.annotation.macro, "UFUNCTION")
        self.assertEqual(method.parameters[1].annotation.text, "UPARAM(ref)")
        self.assertEqual(method.parameters[1].type, Reference(Path(("int32",))))

    def test_export_macro_and_forceinline(self):
        method = _method("ENGINE_API FORCEINLINE float GetHealth() const { return H; }", REFLECTION)
        self.assertEqual(method.name, "GetHealth")
        self.assertEqual(method.return_type, Path(("float",)))

    def test_property_macro_is_not_a_function(self):
        self.assertFalse(parse_method("UPROPERTY()\nint32 Count;", 0, ParseContext(REFLECTION)))


if __name__ == "__main__":
    unittest.main()
