"""
Data models for parsed C++ header declarations.

Type expressions and leaf declarations are frozen dataclasses; containers
(classes, namespaces, the header itself) are filled in by their parser and
handed back complete. Every node offers ``to_dict()`` for JSON output.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional, Tuple


def _encode(value: Any) -> Any:
    if isinstance(value, TypeExpr):
        return value.to_dict()
    if isinstance(value, enum.Enum):
        return value.value
    if is_dataclass(value):
        return {f.name: _encode(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {_encode(key): _encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to a dictionary suitable for JSON serialization."""
        return _encode_fields(self)


def _encode_fields(node: Any) -> Dict[str, Any]:
    return {f.name: _encode(getattr(node, f.name)) for f in fields(node)}


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeExpr:
    """Base of the recursive type-expression value."""

    def render(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        payload = {"kind": type(self).__name__.lower()}
        payload.update(_encode_fields(self))
        return payload

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Placeholder(TypeExpr):
    """The ``auto`` placeholder type."""

    def render(self) -> str:
        return "auto"


@dataclass(frozen=True)
class Path(TypeExpr):
    """Scoped identifier such as ``std::string``; may be empty."""

    segments: Tuple[str, ...] = ()

    def render(self) -> str:
        return "::".join(self.segments)


@dataclass(frozen=True)
class Generic(TypeExpr):
    base: TypeExpr
    arguments: Tuple[TypeExpr, ...] = ()

    def render(self) -> str:
        args = ", ".join(arg.render() for arg in self.arguments)
        return f"{self.base.render()}<{args}>"


@dataclass(frozen=True)
class Function(TypeExpr):
    """Function type: ``int(int, int)`` in ``std::function<...>`` and ``int(*)(int, int)``."""

    return_type: TypeExpr
    parameters: Tuple[TypeExpr, ...] = ()

    def render(self) -> str:
        params = ", ".join(param.render() for param in self.parameters)
        return f"{self.return_type.render()}({params})"


@dataclass(frozen=True)
class Pointer(TypeExpr):
    inner: TypeExpr

    def render(self) -> str:
        if isinstance(self.inner, Function):
            params = ", ".join(param.render() for param in self.inner.parameters)
            return f"{self.inner.return_type.render()}(*)({params})"
        return f"{self.inner.render()}*"


@dataclass(frozen=True)
class Reference(TypeExpr):
    inner: TypeExpr

    def render(self) -> str:
        return f"{self.inner.render()}&"


@dataclass(frozen=True)
class MemberAccess(TypeExpr):
    """Dependent member such as ``T::value``."""

    base: TypeExpr
    member: str

    def render(self) -> str:
        return f"{self.base.render()}::{self.member}"


@dataclass(frozen=True)
class Const(TypeExpr):
    inner: TypeExpr

    def render(self) -> str:
        if isinstance(self.inner, Pointer):
            return f"{self.inner.render()} const"
        return f"const {self.inner.render()}"


@dataclass(frozen=True)
class Array(TypeExpr):
    """Array declarator; ``size`` is the raw bound text or ``""``."""

    inner: TypeExpr
    size: str = ""

    def render(self) -> str:
        return f"{self.inner.render()}[{self.size}]"


@dataclass(frozen=True)
class Literal(TypeExpr):
    """Initializer text that is not shaped like a type (``"x"``, ``-1``, ``a | b``)."""

    text: str

    def render(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------


class AccessLevel(enum.Enum):
    PRIVATE = "private"
    PROTECTED = "protected"
    PUBLIC = "public"
    VIRTUAL = "virtual"
    UNSPECIFIED = "unspecified"


class StorageQualifier(enum.Enum):
    INLINE = "inline"
    CONSTEXPR = "constexpr"
    EXPLICIT = "explicit"
    FRIEND = "friend"
    STATIC = "static"
    VIRTUAL = "virtual"


class PostQualifier(enum.Enum):
    CONST = "const"
    NOEXCEPT = "noexcept"
    OVERRIDE = "override"
    FINAL = "final"


class SpecialMember(enum.Enum):
    PURE_VIRTUAL = "pure_virtual"
    DEFAULTED = "default"
    DELETED = "delete"


class MemberModifier(enum.Enum):
    STATIC = "static"
    CONST = "const"
    INLINE = "inline"
    CONSTEXPR = "constexpr"
    MUTABLE = "mutable"
    VOLATILE = "volatile"
    EXTERN = "extern"
    THREAD_LOCAL = "thread_local"


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Annotation(_Serializable):
    """Dialect macro captured verbatim, e.g. ``UPROPERTY(EditAnywhere)``.

    Attributes:
        macro: The macro name that was recognized.
        text: Full captured text including the argument list.
    """

    macro: str
    text: str

    @property
    def arguments(self) -> str:
        """Text between the outer parentheses, or ``""`` without a list."""
        start = self.text.find("(")
        if start == -1:
            return ""
        return self.text[start + 1 : self.text.rfind(")")].strip()

    def specifiers(self) -> List[str]:
        """Split the argument list on top-level commas.

        Nested groups such as ``meta=(DisplayName="A, B")`` stay intact.
        Entries are not interpreted further.
        """
        parts: List[str] = []
        depth = 0
        quote = ""
        current: List[str] = []
        for ch in self.arguments:
            if quote:
                if ch == quote:
                    quote = ""
            elif ch in "\"'":
                quote = ch
            elif ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
            elif ch == "," and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
            current.append(ch)
        parts.append("".join(current).strip())
        return [part for part in parts if part]


@dataclass(frozen=True)
class Parameter(_Serializable):
    type: TypeExpr
    name: Optional[str] = None
    default: Optional[TypeExpr] = None
    annotation: Optional[Annotation] = None
    variadic: bool = False


@dataclass(frozen=True)
class TemplateParameter(_Serializable):
    """One entry of a ``template<...>`` header.

    Attributes:
        kind: ``typename``, ``class``, or the rendered type of a non-type
            parameter (``int``, ``std::size_t``).
        name: Parameter name; ``None`` for unnamed parameters.
        default: Default argument, if any.
        variadic: Whether the parameter is a pack (``typename... Ts``).
    """

    kind: str
    name: Optional[str] = None
    default: Optional[TypeExpr] = None
    variadic: bool = False


@dataclass(frozen=True)
class Method(_Serializable):
    """A function or method signature. Bodies are recognized but discarded."""

    name: str
    return_type: Optional[TypeExpr] = None
    template_parameters: Tuple[TemplateParameter, ...] = ()
    parameters: Tuple[Parameter, ...] = ()
    storage: Tuple[StorageQualifier, ...] = ()
    qualifiers: Tuple[PostQualifier, ...] = ()
    special: Optional[SpecialMember] = None
    has_body: bool = False
    comment: Optional[str] = None
    annotation: Optional[Annotation] = None

    @property
    def is_virtual(self) -> bool:
        return StorageQualifier.VIRTUAL in self.storage

    @property
    def is_static(self) -> bool:
        return StorageQualifier.STATIC in self.storage

    @property
    def is_const(self) -> bool:
        return PostQualifier.CONST in self.qualifiers

    @property
    def is_pure_virtual(self) -> bool:
        return self.special is SpecialMember.PURE_VIRTUAL

    @property
    def is_destructor(self) -> bool:
        return self.name.startswith("~")

    @property
    def is_operator(self) -> bool:
        return self.name.startswith("operator")

    def signature(self) -> str:
        """Single-line C++ rendering without body, comment or annotation."""
        parts = [qualifier.value for qualifier in self.storage]
        if self.return_type is not None:
            parts.append(self.return_type.render())
        params = []
        for param in self.parameters:
            rendered = param.type.render()
            if param.variadic:
                rendered += "..."
            if param.name:
                rendered += f" {param.name}"
            params.append(rendered)
        parts.append(f"{self.name}({', '.join(params)})")
        parts.extend(qualifier.value for qualifier in self.qualifiers)
        return " ".join(parts)


@dataclass(frozen=True)
class Member(_Serializable):
    name: str
    type: TypeExpr
    default: Optional[TypeExpr] = None
    modifiers: Tuple[MemberModifier, ...] = ()
    comment: Optional[str] = None
    annotation: Optional[Annotation] = None
    bits: Optional[str] = None

    @property
    def is_static(self) -> bool:
        return MemberModifier.STATIC in self.modifiers


@dataclass(frozen=True)
class ParentClass(_Serializable):
    type: TypeExpr
    access: AccessLevel = AccessLevel.UNSPECIFIED
    is_virtual: bool = False


@dataclass(frozen=True)
class Enumerator(_Serializable):
    name: str
    value: Optional[str] = None
    comment: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass(frozen=True)
class EnumDecl(_Serializable):
    name: Optional[str]
    scoped: bool = False
    underlying_type: Optional[TypeExpr] = None
    enumerators: Tuple[Enumerator, ...] = ()
    is_forward_declaration: bool = False
    comment: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass(frozen=True)
class TypeAlias(_Serializable):
    """``using Name = Type;`` or ``typedef Type Name;``."""

    name: str
    type: TypeExpr
    template_parameters: Tuple[TemplateParameter, ...] = ()
    comment: Optional[str] = None


@dataclass(frozen=True)
class UsingDeclaration(_Serializable):
    """``using namespace a::b;`` or ``using Base::Member;``."""

    target: str
    is_namespace: bool = False


@dataclass(frozen=True)
class Include(_Serializable):
    path: str
    system: bool = False


@dataclass(frozen=True)
class Directive(_Serializable):
    """A preprocessor line captured as raw text without the leading ``#``."""

    keyword: str
    text: str


def _push(mapping: Dict[AccessLevel, list], level: AccessLevel, item: Any) -> None:
    mapping.setdefault(level, []).append(item)


@dataclass
class ClassDecl(_Serializable):
    """A class, struct or union with its body partitioned by access level.

    The per-access mappings are sparse: a level only appears once something
    was declared under it.
    """

    name: str
    kind: str = "class"
    api: Optional[str] = None
    parents: List[ParentClass] = field(default_factory=list)
    template_parameters: Tuple[TemplateParameter, ...] = ()
    methods: Dict[AccessLevel, List[Method]] = field(default_factory=dict)
    members: Dict[AccessLevel, List[Member]] = field(default_factory=dict)
    nested: Dict[AccessLevel, List["ClassDecl"]] = field(default_factory=dict)
    enums: Dict[AccessLevel, List[EnumDecl]] = field(default_factory=dict)
    aliases: Dict[AccessLevel, List[TypeAlias]] = field(default_factory=dict)
    usings: List[UsingDeclaration] = field(default_factory=list)
    friends: List[TypeExpr] = field(default_factory=list)
    directives: List[Directive] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    annotation: Optional[Annotation] = None
    comment: Optional[str] = None
    is_forward_declaration: bool = False
    is_final: bool = False

    def add_method(self, level: AccessLevel, method: Method) -> None:
        _push(self.methods, level, method)

    def add_member(self, level: AccessLevel, member: Member) -> None:
        _push(self.members, level, member)

    def add_nested(self, level: AccessLevel, nested: "ClassDecl") -> None:
        _push(self.nested, level, nested)

    def add_enum(self, level: AccessLevel, decl: EnumDecl) -> None:
        _push(self.enums, level, decl)

    def add_alias(self, level: AccessLevel, alias: TypeAlias) -> None:
        _push(self.aliases, level, alias)

    def methods_at(self, level: AccessLevel) -> List[Method]:
        return self.methods.get(level, [])

    def members_at(self, level: AccessLevel) -> List[Member]:
        return self.members.get(level, [])

    def nested_at(self, level: AccessLevel) -> List["ClassDecl"]:
        return self.nested.get(level, [])

    def all_methods(self) -> List[Method]:
        return [method for methods in self.methods.values() for method in methods]

    def all_members(self) -> List[Member]:
        return [member for members in self.members.values() for member in members]

    def all_nested(self) -> List["ClassDecl"]:
        return [item for items in self.nested.values() for item in items]

    @property
    def is_empty(self) -> bool:
        return not (self.methods or self.members or self.nested or self.enums or self.aliases)


@dataclass
class NamespaceDecl(_Serializable):
    name: str
    namespaces: List["NamespaceDecl"] = field(default_factory=list)
    classes: List[ClassDecl] = field(default_factory=list)
    functions: List[Method] = field(default_factory=list)
    variables: List[Member] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    enums: List[EnumDecl] = field(default_factory=list)
    aliases: List[TypeAlias] = field(default_factory=list)
    usings: List[UsingDeclaration] = field(default_factory=list)
    directives: List[Directive] = field(default_factory=list)
    is_inline: bool = False


@dataclass
class Header(_Serializable):
    """Root aggregate for one header file, in source order per list."""

    includes: List[Include] = field(default_factory=list)
    aliases: List[TypeAlias] = field(default_factory=list)
    functions: List[Method] = field(default_factory=list)
    variables: List[Member] = field(default_factory=list)
    classes: List[ClassDecl] = field(default_factory=list)
    namespaces: List[NamespaceDecl] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    enums: List[EnumDecl] = field(default_factory=list)
    defines: List[Directive] = field(default_factory=list)
    directives: List[Directive] = field(default_factory=list)
    usings: List[UsingDeclaration] = field(default_factory=list)

    @property
    def include_paths(self) -> List[str]:
        return [include.path for include in self.includes]
