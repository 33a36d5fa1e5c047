"""
modules.py — module naming and file discovery under a CDK packages directory.

Layout:
  <packages>/@aws-cdk/aws-<name>-alpha/   experimental wrapper modules
  <packages>/aws-cdk-lib/aws-<name>/      stable modules (generated + hand-written)
"""

from pathlib import Path

from cdk_prop_audit.errors import ModuleNameError

ALPHA_PACKAGE_DIR = "@aws-cdk"
STABLE_PACKAGE_DIR = "aws-cdk-lib"

MODULE_PREFIX = "aws-"
ALPHA_SUFFIX = "-alpha"

ALPHA_MODULE_GLOB = "aws-*-alpha"
STABLE_MODULE_GLOB = "aws-*"

GENERATED_SUFFIX = ".generated.ts"
DECLARATION_FILE_SUFFIX = ".d.ts"
IGNORED_DIRS = {"test", "__tests__", "node_modules"}


_CHECKOUT_DIRS = {STABLE_PACKAGE_DIR, "aws-cdk"}


def module_name_from_path(file_path):
    """``.../@aws-cdk/aws-cloudfront-alpha/lib/x.ts`` -> ``cloudfront``.

    The module is the directory right under ``@aws-cdk`` or ``aws-cdk-lib``.
    Paths outside that layout fall back to the innermost ``aws-*`` directory,
    so checkout directories such as ``aws-cdk/`` never count as a module.
    """
    parts = Path(file_path).parts
    dir_parts = parts[:-1]

    for i in range(len(dir_parts) - 2, -1, -1):
        if dir_parts[i] in (ALPHA_PACKAGE_DIR, STABLE_PACKAGE_DIR):
            candidate = dir_parts[i + 1]
            if candidate.startswith(MODULE_PREFIX):
                return short_module_name(candidate)
            break

    for part in reversed(dir_parts):
        if part.startswith(MODULE_PREFIX) and part not in _CHECKOUT_DIRS:
            return short_module_name(part)
    raise ModuleNameError(f"Could not extract module name from path: {file_path}")


def short_module_name(dir_name):
    name = dir_name.replace(ALPHA_SUFFIX, "", 1)
    if name.startswith(MODULE_PREFIX):
        name = name[len(MODULE_PREFIX):]
    return name


def find_modules(alpha_dir, stable_dir):
    """Return (alpha module dirs, stable module dirs), each sorted."""
    alpha = sorted(p for p in Path(alpha_dir).glob(ALPHA_MODULE_GLOB) if p.is_dir())
    stable = sorted(p for p in Path(stable_dir).glob(STABLE_MODULE_GLOB) if p.is_dir())
    return alpha, stable


def declarations_path_for_alpha(stable_dir, alpha_module_path):
    """Stable module that holds the generated declarations for an alpha module."""
    return Path(stable_dir) / (MODULE_PREFIX + short_module_name(Path(alpha_module_path).name))


def find_generated_files(module_path):
    return sorted(p for p in Path(module_path).rglob("*" + GENERATED_SUFFIX) if p.is_file())


def find_implementation_files(module_path):
    """Hand-written ``.ts`` sources: no generated code, no ``.d.ts``, no tests."""
    module_path = Path(module_path)
    files = []
    for p in sorted(module_path.rglob("*.ts")):
        if not p.is_file():
            continue
        if p.name.endswith(GENERATED_SUFFIX) or p.name.endswith(DECLARATION_FILE_SUFFIX):
            continue
        if any(part in IGNORED_DIRS for part in p.relative_to(module_path).parts[:-1]):
            continue
        files.append(p)
    return files
