"""
diff.py — compare declared and implemented schemas.

A declared construct is matched to the first implemented construct with the
same module and the same name once the ``Cfn`` marker is stripped. Declared
constructs with no implementation are not reported.
"""

from typing import Dict, List, Optional, Sequence

from cdk_prop_audit.schema import ConstructSchema, MissingPropertyRecord, PropertySchema


def diff_schemas(
    declared: Sequence[ConstructSchema],
    implemented: Sequence[ConstructSchema],
) -> List[MissingPropertyRecord]:
    """Missing property paths per construct, sorted by (module, name)."""
    records = []
    for decl in declared:
        impl = find_implementation(decl, implemented)
        if impl is None:
            continue

        implemented_names = set(impl.top_level_properties)
        missing = [p for p in decl.top_level_properties if p not in implemented_names]
        missing.extend(compare_nested(decl.detailed, impl.detailed))

        if missing:
            records.append(MissingPropertyRecord(decl.module, decl.name, tuple(missing)))

    return sorted(records, key=lambda r: (r.module, r.name))


def find_implementation(decl: ConstructSchema, implemented: Sequence[ConstructSchema]) -> Optional[ConstructSchema]:
    for impl in implemented:
        if impl.module == decl.module and impl.normalized_name == decl.normalized_name:
            return impl
    return None


def compare_nested(
    declared: Dict[str, PropertySchema],
    implemented: Dict[str, PropertySchema],
    path: str = "",
) -> List[str]:
    """Dotted paths of nested children the implementation leaves out.

    Only properties present on both sides are descended into, so a property
    missing at one level is never reported again for its children.
    """
    missing = []
    for name, decl_prop in declared.items():
        impl_prop = implemented.get(name)
        if impl_prop is None or not decl_prop.nested_properties:
            continue

        prefix = f"{path}.{name}" if path else name
        impl_children = impl_prop.nested_properties or {}
        for child in decl_prop.nested_properties:
            if child not in impl_children:
                missing.append(f"{prefix}.{child}")

        missing.extend(compare_nested(decl_prop.nested_properties, impl_children, prefix))
    return missing
