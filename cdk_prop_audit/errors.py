"""Exception types raised by the audit."""


class AuditError(Exception):
    """Base class for every error the audit raises on purpose."""


class SourceParseError(AuditError):
    """A source file could not be parsed into a syntax tree."""


class ModuleNameError(AuditError):
    """A file path does not contain an ``aws-*`` module segment."""


class MissingInputError(AuditError):
    """A required input directory does not exist."""
