"""
ts_nodes.py — tree-sitter parsing and typed views over TypeScript syntax nodes.

Type annotations are converted into a small closed set of variants so the
resolvers dispatch on Python classes instead of comparing node type strings
at every step.

CRITICAL: Node text is read via node.text.decode('utf-8'), never manual byte slicing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from cdk_prop_audit.errors import SourceParseError

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

NULL_LIKE = frozenset({"null", "undefined"})

# Wrappers that carry exactly one inner type and add nothing to its shape.
_TRANSPARENT_TYPES = {"type_annotation", "parenthesized_type", "readonly_type", "type", "primary_type"}

_parser = None


# --- Helpers ---

def text(node):
    """Safely decode node text. CRITICAL: always use node.text, never byte slicing."""
    if node is None:
        return None
    return node.text.decode("utf-8")


def named(node):
    """Named children of a node, comments excluded."""
    if node is None:
        return []
    return [c for c in node.named_children if c.type != "comment"]


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order walk of the whole tree, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _first_error_line(root):
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return None


# --- Parsing ---

def get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(TS_LANGUAGE)
    return _parser


def parse_source(source: Union[bytes, str]) -> Tree:
    """Parse TypeScript source into a tree-sitter tree.

    Raises SourceParseError for undecodable bytes or any syntax error in the tree.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    else:
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(f"Source is not valid UTF-8: {e}") from e

    tree = get_parser().parse(source)
    if tree.root_node.has_error:
        line = _first_error_line(tree.root_node)
        raise SourceParseError(f"Syntax error near line {line}" if line else "Syntax error")
    return tree


# --- Type variants ---

@dataclass(frozen=True)
class Keyword:
    """Predefined or literal type (string, boolean, 'a', 42, ...)."""
    text: str


@dataclass(frozen=True)
class NullLike:
    text: str


@dataclass(frozen=True)
class UnionOf:
    """Union members flattened in source order."""
    members: Tuple["TypeNode", ...]


@dataclass(frozen=True)
class OptionalOf:
    inner: "TypeNode"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a named type.

    ``name`` is the final segment; ``qualified`` keeps the full dotted name
    (``CfnX.FooProperty``) when the reference was written qualified.
    """
    name: str
    qualified: Optional[str] = None

    def lookup_keys(self):
        """Index keys to try, most specific first."""
        if self.qualified:
            return (self.qualified, self.name)
        return (self.name,)


@dataclass(frozen=True)
class Generic:
    name: str
    args: Tuple["TypeNode", ...]


@dataclass(frozen=True)
class ListOf:
    """``T[]`` shorthand."""
    element: "TypeNode"


@dataclass(frozen=True)
class TypeLiteral:
    """Inline ``{ ... }`` object type; ``node`` is the object_type syntax node."""
    node: Node


@dataclass(frozen=True)
class Opaque:
    """Any type shape the resolvers never look inside (functions, tuples, ...)."""
    text: str


TypeNode = Union[Keyword, NullLike, UnionOf, OptionalOf, TypeRef, Generic, ListOf, TypeLiteral, Opaque]


def _final_segment(node):
    """``cdk.IResolvable`` -> ``IResolvable``; plain identifiers pass through."""
    if node.type == "nested_type_identifier":
        return text(node.child_by_field_name("name"))
    return text(node)


def to_type(node: Optional[Node]) -> Optional[TypeNode]:
    """Convert a tree-sitter type node into a TypeNode variant."""
    if node is None:
        return None
    kind = node.type

    if kind in _TRANSPARENT_TYPES:
        inner = named(node)
        return to_type(inner[0]) if inner else None

    node_text = text(node)
    if node_text in NULL_LIKE:
        return NullLike(node_text)

    if kind == "optional_type":
        inner = named(node)
        return OptionalOf(to_type(inner[0])) if inner else None

    if kind == "union_type":
        members = []
        for child in named(node):
            converted = to_type(child)
            if isinstance(converted, UnionOf):
                members.extend(converted.members)
            elif converted is not None:
                members.append(converted)
        return UnionOf(tuple(members))

    if kind == "type_identifier":
        return TypeRef(node_text)

    if kind == "nested_type_identifier":
        return TypeRef(_final_segment(node), "".join(node_text.split()))

    if kind == "generic_type":
        name_node = node.child_by_field_name("name")
        args_node = node.child_by_field_name("type_arguments")
        args = tuple(t for t in (to_type(a) for a in named(args_node)) if t is not None)
        return Generic(_final_segment(name_node) if name_node else "", args)

    if kind == "array_type":
        inner = named(node)
        return ListOf(to_type(inner[0])) if inner else Opaque(node_text)

    if kind == "object_type":
        return TypeLiteral(node)

    if kind in ("predefined_type", "literal_type"):
        return Keyword(node_text)

    return Opaque(node_text)


# --- Declaration members ---

def property_signatures(container: Optional[Node]) -> Iterator[Tuple[str, Optional[Node]]]:
    """Yield (name, type_node) for each identifier-named property signature.

    ``container`` is an interface body or an inline object type. Method, index,
    call and construct signatures are skipped, as are string/computed names.
    """
    if container is None:
        return
    for child in named(container):
        if child.type != "property_signature":
            continue
        name_node = child.child_by_field_name("name")
        if name_node is None or name_node.type != "property_identifier":
            continue
        yield text(name_node), child.child_by_field_name("type")
