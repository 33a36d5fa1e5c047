"""
schema.py — value types shared by the extractors and the diff.

All of these are built once per scanned file and never mutated afterwards.
The dataclasses are frozen, but the ``dict`` mappings they hold are plain
dicts: immutability is by convention below the attribute level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# Marker prefix carried by generated resource classes (CfnDistribution, ...).
RESOURCE_PREFIX = "Cfn"


@dataclass(frozen=True)
class PropertySchema:
    """One configuration property and, when it is an object shape, its children.

    ``nested_properties`` is None for a leaf (scalar, unresolvable or
    truncated type).
    """

    name: str
    nested_properties: Optional[Dict[str, "PropertySchema"]] = None

    @property
    def is_leaf(self) -> bool:
        return self.nested_properties is None


@dataclass(frozen=True)
class ConstructSchema:
    """The property shape of one construct, declared or implemented."""

    module: str
    name: str
    top_level_properties: Tuple[str, ...]
    detailed: Dict[str, PropertySchema] = field(default_factory=dict)

    @property
    def normalized_name(self) -> str:
        return normalize_construct_name(self.name)


@dataclass(frozen=True)
class MissingPropertyRecord:
    module: str
    name: str
    missing_props: Tuple[str, ...]

    def to_dict(self):
        return {
            "module": self.module,
            "name": self.name,
            "missingProps": list(self.missing_props),
        }


def normalize_construct_name(name: str) -> str:
    """Strip the ``Cfn`` marker so declared and implemented names compare equal."""
    if name.startswith(RESOURCE_PREFIX):
        return name[len(RESOURCE_PREFIX):]
    return name


def schema_depth(properties: Optional[Dict[str, PropertySchema]], depth: int = 0) -> int:
    """Deepest node depth in a property mapping whose entries sit at ``depth``."""
    if not properties:
        return depth - 1
    deepest = depth
    for prop in properties.values():
        if prop.nested_properties:
            deepest = max(deepest, schema_depth(prop.nested_properties, depth + 1))
    return deepest
