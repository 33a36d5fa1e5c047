"""
declared.py — property schemas from generated ``*Props`` interfaces.

Each member type is resolved into nested property names:
  - optional wrappers unwrap to their inner type
  - unions drop undefined, null and IResolvable, then take the FIRST remaining
    member in source order (other members are not modelled)
  - Array<T> / ReadonlyArray<T> / T[] resolve T; Record<K, V> resolves V;
    the container adds no nesting level
  - other generics, unknown names and cyclic references are leaves
  - named interfaces, aliases and inline object types recurse into their members

Nesting stops at MAX_DEPTH; anything deeper becomes a leaf.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Optional

from cdk_prop_audit.schema import ConstructSchema, PropertySchema, schema_depth
from cdk_prop_audit.ts_nodes import (
    Generic,
    ListOf,
    NullLike,
    OptionalOf,
    TypeLiteral,
    TypeNode,
    TypeRef,
    UnionOf,
    iter_nodes,
    property_signatures,
    text,
    to_type,
)

log = logging.getLogger(__name__)

MAX_DEPTH = 3
PROPS_SUFFIX = "Props"
RESOLVABLE_MARKER = "IResolvable"
LIST_TYPE_NAMES = frozenset({"Array", "ReadonlyArray"})
MAP_TYPE_NAMES = frozenset({"Record"})

Nested = Optional[Dict[str, PropertySchema]]


def extract_declared_schemas(tree, index, module_name):
    """Build a ConstructSchema for every ``*Props`` interface with at least one property."""
    results = []
    for node in iter_nodes(tree.root_node):
        if node.type != "interface_declaration":
            continue
        interface_name = text(node.child_by_field_name("name")) or ""
        if not interface_name.endswith(PROPS_SUFFIX):
            continue

        members = list(property_signatures(node.child_by_field_name("body")))
        if not members:
            continue

        detailed = {}
        for name, type_node in members:
            detailed[name] = PropertySchema(name, resolve_type(to_type(type_node), index))

        schema = ConstructSchema(
            module=module_name,
            name=interface_name[: -len(PROPS_SUFFIX)],
            top_level_properties=tuple(name for name, _ in members),
            detailed=detailed,
        )
        log.debug(
            f"{module_name}/{schema.name}: {len(schema.top_level_properties)} properties, "
            f"depth {schema_depth(detailed)}"
        )
        results.append(schema)
    return results


def resolve_type(
    type_: Optional[TypeNode],
    index,
    depth: int = 0,
    visited: FrozenSet[str] = frozenset(),
) -> Nested:
    """Resolve a type into its nested properties, or None for a leaf.

    ``visited`` holds the type names already entered on this branch only.
    Each descent passes an extended copy, so sibling properties never see
    each other's history.
    """
    if type_ is None or depth >= MAX_DEPTH:
        return None

    if isinstance(type_, OptionalOf):
        return resolve_type(type_.inner, index, depth, visited)

    if isinstance(type_, UnionOf):
        candidates = union_candidates(type_)
        if not candidates:
            return None
        return resolve_type(candidates[0], index, depth, visited)

    if isinstance(type_, Generic):
        element = _container_element(type_)
        if element is None:
            return None
        return resolve_type(element, index, depth, visited)

    if isinstance(type_, ListOf):
        return resolve_type(type_.element, index, depth, visited)

    if isinstance(type_, TypeRef):
        key, declaration = lookup_declaration(type_, index)
        if declaration is None or key in visited:
            return None
        return _resolve_declaration(declaration, index, depth, visited | {key})

    if isinstance(type_, TypeLiteral):
        return _resolve_members(type_.node, index, depth + 1, visited)

    # Keyword, NullLike, Opaque
    return None


def union_candidates(union: UnionOf):
    """Union members that can carry a shape, in source order."""
    return [
        member for member in union.members
        if not isinstance(member, NullLike)
        and not (isinstance(member, TypeRef) and member.name == RESOLVABLE_MARKER)
    ]


def lookup_declaration(ref: TypeRef, index):
    """Return (key, declaration), trying the qualified name before the simple one."""
    for key in ref.lookup_keys():
        declaration = index.get(key)
        if declaration is not None:
            return key, declaration
    return ref.name, None


def _container_element(generic: Generic) -> Optional[TypeNode]:
    if not 1 <= len(generic.args) <= 2:
        return None
    if generic.name in LIST_TYPE_NAMES:
        return generic.args[0]
    if generic.name in MAP_TYPE_NAMES and len(generic.args) == 2:
        return generic.args[1]
    return None


def _resolve_declaration(declaration, index, depth, visited) -> Nested:
    if declaration.type == "interface_declaration":
        return _resolve_members(declaration.child_by_field_name("body"), index, depth + 1, visited)
    # type alias: resolve whatever it stands for at the same depth
    return resolve_type(to_type(declaration.child_by_field_name("value")), index, depth, visited)


def _resolve_members(container, index, depth, visited) -> Dict[str, PropertySchema]:
    properties = {}
    for name, type_node in property_signatures(container):
        properties[name] = PropertySchema(name, resolve_type(to_type(type_node), index, depth, visited))
    return properties
