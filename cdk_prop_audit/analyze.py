"""
analyze.py — per-file extraction, per-module diffing and the full packages run.

Per-file failures never abort a module: they are logged, recorded in the
module report and the file contributes nothing.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from cdk_prop_audit.call_sites import extract_implemented_schemas
from cdk_prop_audit.declared import extract_declared_schemas
from cdk_prop_audit.diff import diff_schemas
from cdk_prop_audit.errors import AuditError, MissingInputError
from cdk_prop_audit.modules import (
    ALPHA_PACKAGE_DIR,
    STABLE_PACKAGE_DIR,
    declarations_path_for_alpha,
    find_generated_files,
    find_implementation_files,
    find_modules,
    module_name_from_path,
)
from cdk_prop_audit.schema import ConstructSchema, MissingPropertyRecord
from cdk_prop_audit.ts_nodes import parse_source
from cdk_prop_audit.type_index import build_type_index

log = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "missingProperties.json"


@dataclass
class ModuleReport:
    module_name: str
    missing_properties: List[MissingPropertyRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


# --- File processing ---

def _load(file_path):
    """Return (module_name, tree) for a source file; raises AuditError or OSError."""
    module_name = module_name_from_path(file_path)
    tree = parse_source(Path(file_path).read_bytes())
    return module_name, tree


def process_declaration_file(file_path) -> Tuple[List[ConstructSchema], Optional[str]]:
    """Parse a generated file and return (declared schemas, error_msg)."""
    try:
        module_name, tree = _load(file_path)
    except (AuditError, OSError) as e:
        return [], f"{e}"
    index = build_type_index(tree)
    return extract_declared_schemas(tree, index, module_name), None


def process_implementation_file(file_path) -> Tuple[List[ConstructSchema], Optional[str]]:
    """Parse a hand-written file and return (implemented schemas, error_msg)."""
    try:
        module_name, tree = _load(file_path)
    except (AuditError, OSError) as e:
        return [], f"{e}"
    return extract_implemented_schemas(tree, module_name), None


# --- Module analysis ---

def analyze_module(module_path, declarations_path) -> ModuleReport:
    """Diff the constructs implemented in ``module_path`` against the
    declarations generated under ``declarations_path``."""
    module_path = Path(module_path)
    report = ModuleReport(module_name=module_path.name)
    log.info(f"Analyzing module: {module_path.name}")

    declared = []
    declaration_files = find_generated_files(declarations_path)
    log.info(f"Processing {len(declaration_files)} declaration files in {declarations_path}")
    for fpath in declaration_files:
        schemas, error = process_declaration_file(fpath)
        if error:
            log.warning(f"Skipping {fpath}: {error}")
            report.errors.append(f"{fpath}: {error}")
            continue
        if schemas:
            log.info(f"Found {len(schemas)} property definitions in {fpath.name}")
            declared.extend(schemas)

    implemented = []
    implementation_files = find_implementation_files(module_path)
    log.info(f"Processing {len(implementation_files)} implementation files in {module_path}")
    for fpath in implementation_files:
        schemas, error = process_implementation_file(fpath)
        if error:
            log.warning(f"Skipping {fpath}: {error}")
            report.errors.append(f"{fpath}: {error}")
            continue
        if schemas:
            log.info(f"Found {len(schemas)} resource constructions in {fpath.name}")
            implemented.extend(schemas)

    report.missing_properties = diff_schemas(declared, implemented)
    return report


def run_analysis(packages_dir) -> List[ModuleReport]:
    """Analyze every alpha module, then every stable module, under ``packages_dir``.

    Raises MissingInputError before doing any work if either package directory is absent.
    """
    packages_dir = Path(packages_dir)
    alpha_dir = packages_dir / ALPHA_PACKAGE_DIR
    stable_dir = packages_dir / STABLE_PACKAGE_DIR

    missing = [str(d) for d in (alpha_dir, stable_dir) if not d.is_dir()]
    if missing:
        raise MissingInputError(f"Required directories do not exist: {', '.join(missing)}")

    log.info(f"{ALPHA_PACKAGE_DIR} directory: {alpha_dir}")
    log.info(f"{STABLE_PACKAGE_DIR} directory: {stable_dir}")

    alpha_modules, stable_modules = find_modules(alpha_dir, stable_dir)
    log.info(f"Found {len(alpha_modules)} alpha modules and {len(stable_modules)} stable modules")

    targets = [(m, declarations_path_for_alpha(stable_dir, m)) for m in alpha_modules]
    targets += [(m, m) for m in stable_modules]

    reports = []
    for module_path, declarations_path in targets:
        try:
            reports.append(analyze_module(module_path, declarations_path))
        except Exception as e:
            log.error(f"Error analyzing module {module_path}: {e}")
    return reports


# --- Output ---

def collect_records(reports):
    """All records across modules, sorted by (module, name)."""
    records = [r for report in reports for r in report.missing_properties]
    return sorted(records, key=lambda r: (r.module, r.name))


def write_results(reports, output_path):
    records = collect_records(reports)
    output_path = Path(output_path)
    with open(output_path, "w", encoding="utf-8") as out:
        json.dump([r.to_dict() for r in records], out, indent=2, ensure_ascii=False)
    log.info(f"Wrote {len(records)} records to {output_path}")
    return records


def log_summary(reports):
    log.info("Analysis Summary:")
    for report in reports:
        log.info(f"{report.module_name}: {len(report.missing_properties)} constructs with missing properties")
