"""
call_sites.py — property schemas from ``new CfnXxx(scope, 'Resource', { ... })`` calls.

Only calls whose second argument is the literal 'Resource' are the wrapper's
own construction of its underlying resource. Nesting comes from object literals
written in the file, never from type inference.

Identifier references are followed exactly one hop within the same file:
  - ``...cfnProps`` inlines the keys of ``const cfnProps = { ... }``
  - ``distributionConfig: config`` nests the keys of ``const config = { ... }``
References found inside an inlined object are not followed again.
"""

import logging

from cdk_prop_audit.declared import MAX_DEPTH
from cdk_prop_audit.schema import RESOURCE_PREFIX, ConstructSchema, PropertySchema
from cdk_prop_audit.ts_nodes import iter_nodes, named, text

log = logging.getLogger(__name__)

RESOURCE_ID = "Resource"

# Expression wrappers that do not change the value's shape.
_TRANSPARENT_EXPRESSIONS = {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}


def collect_object_variables(tree):
    """Map variable name -> object literal initializer, for every declarator in the file.

    Declarators without an initializer, or initialized with anything other than
    an object literal, are ignored. Later declarations win regardless of scope.
    """
    variables = {}
    for node in iter_nodes(tree.root_node):
        if node.type != "variable_declarator":
            continue
        name_node = node.child_by_field_name("name")
        value = _unwrap(node.child_by_field_name("value"))
        if name_node is None or name_node.type != "identifier":
            continue
        if value is None or value.type != "object":
            continue
        variables[text(name_node)] = value
    return variables


def extract_implemented_schemas(tree, module_name):
    """Build a ConstructSchema for every resource construction call in the tree."""
    variables = collect_object_variables(tree)
    results = []

    for node in iter_nodes(tree.root_node):
        if node.type != "new_expression":
            continue
        callee = _callee_name(node.child_by_field_name("constructor"))
        if not callee or not callee.startswith(RESOURCE_PREFIX):
            continue

        args = named(node.child_by_field_name("arguments"))
        if len(args) < 2 or _string_value(args[1]) != RESOURCE_ID:
            continue

        detailed = {}
        if len(args) > 2:
            props_arg = _unwrap(args[2])
            if props_arg is not None and props_arg.type == "object":
                detailed = _object_properties(props_arg, variables, depth=0, follow=True)

        if not detailed:
            log.debug(f"{module_name}/{callee}: construction call forwards no properties")
            continue

        results.append(ConstructSchema(
            module=module_name,
            name=callee,
            top_level_properties=tuple(detailed),
            detailed=detailed,
        ))
    return results


# --- Helpers ---

def _unwrap(node):
    while node is not None and node.type in _TRANSPARENT_EXPRESSIONS:
        inner = named(node)
        node = inner[0] if inner else None
    return node


def _callee_name(node):
    """``CfnX`` for ``new CfnX(...)`` and ``new cdk.aws_x.CfnX(...)``."""
    if node is None:
        return None
    if node.type == "identifier":
        return text(node)
    if node.type == "member_expression":
        prop = node.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            return text(prop)
    return None


def _string_value(node):
    if node is None or node.type != "string":
        return None
    return text(node)[1:-1]


def _object_properties(obj, variables, depth, follow):
    """Property schemas for the entries of an object literal whose keys sit at ``depth``."""
    properties = {}
    for entry in named(obj):
        if entry.type == "pair":
            key = entry.child_by_field_name("key")
            if key is None or key.type != "property_identifier":
                continue
            name = text(key)
            nested = _value_shape(entry.child_by_field_name("value"), variables, depth, follow)
            properties[name] = PropertySchema(name, nested)

        elif entry.type == "shorthand_property_identifier":
            name = text(entry)
            properties[name] = PropertySchema(name, _reference_shape(name, variables, depth, follow))

        elif entry.type == "spread_element" and follow:
            argument = named(entry)
            if not argument or argument[0].type != "identifier":
                continue
            target = variables.get(text(argument[0]))
            if target is not None:
                properties.update(_object_properties(target, variables, depth, follow=False))

    return properties


def _value_shape(value, variables, depth, follow):
    if depth >= MAX_DEPTH:
        return None
    value = _unwrap(value)
    if value is None:
        return None
    if value.type == "object":
        return _object_properties(value, variables, depth + 1, follow)
    if value.type == "array":
        # Lists add no nesting level; the first element with a shape stands for all.
        for element in named(value):
            shape = _value_shape(element, variables, depth, follow)
            if shape is not None:
                return shape
        return None
    if value.type == "identifier":
        return _reference_shape(text(value), variables, depth, follow)
    return None


def _reference_shape(name, variables, depth, follow):
    if not follow or depth >= MAX_DEPTH:
        return None
    target = variables.get(name)
    if target is None:
        return None
    return _object_properties(target, variables, depth + 1, follow=False)
