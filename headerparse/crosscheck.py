"""
Grammar-gap detection against a tree-sitter reference outline.

The structural parser is strict: anything it cannot recognize fails the
parse. For headers it *does* accept, this module compares the classes and
namespaces it found with the ones tree-sitter-cpp finds, so silently
misfiled declarations show up as outline differences.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, Union

import tree_sitter_cpp as tscpp
from tree_sitter import Language, Node, Parser, Tree

from core.naming import normalize_cpp_entity_name, qualify, split_qualified_name, strip_template_arguments
from headerparse.dialects import Dialect
from headerparse.models import ClassDecl, Header, NamespaceDecl
from headerparse.parser import create_parser

logger = logging.getLogger(__name__)

# Module-level language constant
CPP_LANGUAGE = Language(tscpp.language())

CLASS_NODE_KINDS = {
    "class_specifier": "class",
    "struct_specifier": "struct",
    "union_specifier": "union",
}
NAMESPACE_NODE = "namespace_definition"
TEMPLATE_WRAPPER = "template_declaration"
DECLARATION_NODES = {"declaration", "field_declaration"}
TRANSPARENT_WRAPPERS = {"linkage_specification"}
CONTAINER_TYPES = {
    "translation_unit",
    "declaration_list",
    "field_declaration_list",
    "preproc_ifdef",
    "preproc_ifndef",
    "preproc_if",
    "preproc_elif",
    "preproc_else",
}

OutlineEntry = Tuple[str, str]


@dataclass
class OutlineDiff:
    """Outline entries only one side reported.

    Attributes:
        missing: Found by tree-sitter but not by the structural parser.
        unexpected: Found by the structural parser but not by tree-sitter.
        reference_errors: Number of ERROR/MISSING nodes in the reference tree;
            a non-zero count means the reference itself is unreliable.
    """

    missing: List[OutlineEntry] = field(default_factory=list)
    unexpected: List[OutlineEntry] = field(default_factory=list)
    reference_errors: int = 0

    @property
    def is_clean(self) -> bool:
        return not self.missing and not self.unexpected


def create_reference_parser() -> Parser:
    """Create a tree-sitter parser for C++."""
    parser = Parser(CPP_LANGUAGE)
    logger.debug("Created tree-sitter C++ parser")
    return parser


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a tree-sitter tree."""
    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        stack.extend(node.children)
    return count


def _node_name(node: Node) -> Optional[str]:
    name_node = node.child_by_field_name("name")
    if name_node is None or not name_node.text:
        return None
    return normalize_cpp_entity_name(strip_template_arguments(name_node.text.decode("utf-8")))


def _macro_broken_class(node: Node) -> Optional[OutlineEntry]:
    """``class API_MACRO Name {...}`` that tree-sitter reads as a function definition."""
    if node.type != "function_definition" or not node.text:
        return None
    stripped = node.text.decode("utf-8", errors="ignore").strip()
    for keyword in ("class", "struct"):
        if stripped.startswith(keyword + " "):
            declarator = node.child_by_field_name("declarator")
            if declarator is not None and declarator.text:
                name = normalize_cpp_entity_name(declarator.text.decode("utf-8"))
                logger.info(f"Detected macro-broken {keyword} '{name}' at line {node.start_point.row + 1}")
                return keyword, name
    return None


def _walk_reference(node: Node, stack: List[str], outline: Set[OutlineEntry]) -> None:
    for child in node.children:
        if not child.is_named:
            continue
        if child.type in CLASS_NODE_KINDS:
            _add_reference_class(child, stack, outline)
        elif child.type == NAMESPACE_NODE:
            name = _node_name(child)
            new_stack = stack.copy()
            for part in split_qualified_name(name or ""):
                new_stack.append(part)
                outline.add(("namespace", qualify(new_stack[:-1], part)))
            body = child.child_by_field_name("body")
            if body is not None:
                _walk_reference(body, new_stack, outline)
        elif child.type in DECLARATION_NODES or child.type == TEMPLATE_WRAPPER:
            type_node = child.child_by_field_name("type")
            if type_node is not None and type_node.type in CLASS_NODE_KINDS:
                _add_reference_class(type_node, stack, outline)
            else:
                _walk_reference(child, stack, outline)
        elif child.type == "function_definition":
            broken = _macro_broken_class(child)
            if broken is not None:
                outline.add((broken[0], qualify(stack, broken[1])))
        elif child.type in TRANSPARENT_WRAPPERS:
            body = child.child_by_field_name("body")
            if body is not None:
                _walk_reference(body, stack, outline)
        elif child.type in CONTAINER_TYPES:
            _walk_reference(child, stack, outline)


def _add_reference_class(node: Node, stack: List[str], outline: Set[OutlineEntry]) -> None:
    body = node.child_by_field_name("body")
    name = _node_name(node)
    if body is None or not name:
        return
    outline.add((CLASS_NODE_KINDS[node.type], qualify(stack, name)))
    _walk_reference(body, stack + [name], outline)


def reference_outline(source: bytes) -> Tuple[Set[OutlineEntry], int]:
    """Classes/structs/unions with a body, and namespaces, per tree-sitter.

    Returns:
        ``(outline, error_node_count)``.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")
    tree = create_reference_parser().parse(source)
    errors = count_error_nodes(tree)
    if errors:
        logger.warning(f"Reference tree contains {errors} syntax error nodes")
    outline: Set[OutlineEntry] = set()
    _walk_reference(tree.root_node, [], outline)
    return outline, errors


def _add_class(decl: ClassDecl, stack: List[str], outline: Set[OutlineEntry]) -> None:
    if decl.is_forward_declaration:
        return
    outline.add((decl.kind, qualify(stack, decl.name)))
    for nested in decl.all_nested():
        _add_class(nested, stack + [decl.name], outline)


def _add_namespace(decl: NamespaceDecl, stack: List[str], outline: Set[OutlineEntry]) -> None:
    new_stack = stack + [decl.name] if decl.name else stack
    if decl.name:
        outline.add(("namespace", qualify(stack, decl.name)))
    for inner in decl.namespaces:
        _add_namespace(inner, new_stack, outline)
    for declared in decl.classes:
        _add_class(declared, new_stack, outline)


def header_outline(header: Header) -> Set[OutlineEntry]:
    """The same outline, computed from a parsed ``Header``."""
    outline: Set[OutlineEntry] = set()
    for declared in header.classes:
        _add_class(declared, [], outline)
    for namespace in header.namespaces:
        _add_namespace(namespace, [], outline)
    return outline


def crosscheck(source: bytes, header: Header) -> OutlineDiff:
    """Compare a parsed header with the tree-sitter outline of the same bytes."""
    reference, errors = reference_outline(source)
    ours = header_outline(header)
    diff = OutlineDiff(
        missing=sorted(reference - ours),
        unexpected=sorted(ours - reference),
        reference_errors=errors,
    )
    if not diff.is_clean:
        logger.warning(
            f"Outline mismatch: {len(diff.missing)} missing, {len(diff.unexpected)} unexpected"
        )
    return diff


def crosscheck_file(file_path: str, dialect: Union[Dialect, str, None] = None) -> OutlineDiff:
    """Parse ``file_path`` and compare it with the tree-sitter outline."""
    with open(file_path, "rb") as f:
        source_bytes = f.read()
    header = create_parser(dialect).parse_bytes(source_bytes, str(file_path))
    return crosscheck(source_bytes, header)
