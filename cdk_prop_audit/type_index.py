"""
type_index.py — name -> declaration lookup for one parsed source file.

Interfaces and type aliases are indexed wherever they are declared, including
inside ``export namespace CfnXxx { ... }`` blocks, which is where generated code
puts the nested ``XxxProperty`` interfaces.

Every declaration is stored under its simple name (a later declaration with the
same name replaces an earlier one). Declarations inside namespaces are also
stored under their qualified name (``CfnInstance.PrivateIpProperty``), so two
resources' nested types with the same simple name stay apart.
"""

from typing import Dict

from tree_sitter import Node, Tree

from cdk_prop_audit.ts_nodes import iter_nodes, text

DECLARATION_TYPES = {"interface_declaration", "type_alias_declaration"}
NAMESPACE_TYPES = {"internal_module", "module"}


def build_type_index(tree: Tree) -> Dict[str, Node]:
    index = {}
    for node in iter_nodes(tree.root_node):
        if node.type not in DECLARATION_TYPES:
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            continue
        name = text(name_node)
        index[name] = node
        namespace = namespace_path(node)
        if namespace:
            index[f"{namespace}.{name}"] = node
    return index


def namespace_path(node):
    """Dotted names of the namespaces enclosing ``node``, outermost first."""
    names = []
    parent = node.parent
    while parent is not None:
        if parent.type in NAMESPACE_TYPES:
            name_node = parent.child_by_field_name("name")
            if name_node is not None:
                names.append("".join(text(name_node).split()))
        parent = parent.parent
    return ".".join(reversed(names))
