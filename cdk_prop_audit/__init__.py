"""
cdk_prop_audit — find configuration properties that hand-written CDK constructs
fail to forward to the generated ``Cfn*`` resources they wrap.
"""

from cdk_prop_audit.analyze import ModuleReport, analyze_module, run_analysis, write_results
from cdk_prop_audit.call_sites import extract_implemented_schemas
from cdk_prop_audit.declared import extract_declared_schemas, resolve_type
from cdk_prop_audit.diff import compare_nested, diff_schemas
from cdk_prop_audit.errors import AuditError, MissingInputError, ModuleNameError, SourceParseError
from cdk_prop_audit.schema import ConstructSchema, MissingPropertyRecord, PropertySchema
from cdk_prop_audit.type_index import build_type_index

__version__ = "0.1.0"

__all__ = [
    "AuditError",
    "ConstructSchema",
    "MissingInputError",
    "MissingPropertyRecord",
    "ModuleNameError",
    "ModuleReport",
    "PropertySchema",
    "SourceParseError",
    "analyze_module",
    "build_type_index",
    "compare_nested",
    "diff_schemas",
    "extract_declared_schemas",
    "extract_implemented_schemas",
    "resolve_type",
    "run_analysis",
    "write_results",
]
