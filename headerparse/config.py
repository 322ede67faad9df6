"""
Configuration constants for the C++ header grammar.

Keyword sets, the operator-name catalogue and recursion limits shared by
every recognizer.
"""

from typing import Set

# Storage qualifiers that may precede a function signature
STORAGE_QUALIFIERS: tuple = (
    "inline",
    "constexpr",
    "explicit",
    "friend",
    "static",
    "virtual",
)

# Qualifiers that may follow a parameter list
POST_QUALIFIERS: tuple = (
    "const",
    "noexcept",
    "override",
    "final",
)

# Modifiers accepted in front of a data member
MEMBER_MODIFIERS: tuple = (
    "static",
    "const",
    "inline",
    "constexpr",
    "mutable",
    "volatile",
    "extern",
    "thread_local",
)

# Keywords allowed in front of a path segment inside a type
ELABORATED_KEYWORDS: tuple = (
    "class",
    "typename",
    "struct",
    "enum",
)

# Words that combine into a single fundamental type segment
FUNDAMENTAL_PREFIXES: Set[str] = {
    "unsigned",
    "signed",
    "short",
    "long",
}

FUNDAMENTAL_TAILS: Set[str] = {
    "int",
    "char",
    "short",
    "long",
    "double",
}

# Access specifiers (class body and inheritance list)
ACCESS_KEYWORDS: tuple = (
    "public",
    "protected",
    "private",
)

# Class-like keywords
CLASS_KEYWORDS: tuple = (
    "class",
    "struct",
    "union",
)

# Overloadable operator tokens, longest first so prefixes never shadow
OPERATOR_TOKENS: tuple = (
    "new[]",
    "delete[]",
    "->*",
    "<=>",
    "<<=",
    ">>=",
    "()",
    "[]",
    "->",
    "++",
    "--",
    "<<",
    ">>",
    "<=",
    ">=",
    "==",
    "!=",
    "&&",
    "||",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "new",
    "delete",
    "+",
    "-",
    "*",
    "/",
    "%",
    "^",
    "&",
    "|",
    "~",
    "!",
    "=",
    "<",
    ">",
    ",",
)

# Identifiers that can never be a type path segment or declarator name
RESERVED_WORDS: Set[str] = {
    "public",
    "protected",
    "private",
    "class",
    "struct",
    "union",
    "enum",
    "namespace",
    "template",
    "typename",
    "using",
    "typedef",
    "friend",
    "operator",
    "return",
    "static",
    "inline",
    "constexpr",
    "explicit",
    "virtual",
    "extern",
    "mutable",
    "thread_local",
    "override",
    "final",
    "noexcept",
    "default",
    "delete",
    "new",
    "const",
    "volatile",
}

# Names whose return type collapses to "no return type"
VOID_TYPE: str = "void"

# Placeholder type keyword
AUTO_TYPE: str = "auto"

# UTF-8 byte-order mark as decoded text
BYTE_ORDER_MARK: str = "\ufeff"

# Upper bound on class/namespace/type nesting before a parse fails
MAX_NESTING_DEPTH: int = 64

# Header file extensions accepted by the file entry point
HEADER_EXTENSIONS: Set[str] = {
    ".h",
    ".hh",
    ".hpp",
    ".hxx",
    ".inl",
}
