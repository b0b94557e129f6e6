"""
Exception hierarchy for the validation and audit core.

Everything raised by the core inherits from FieldAuditError so callers can
catch broadly or narrowly. Each exception carries structured details for the
diagnostic log.
"""

from typing import Any, Dict, Optional


class FieldAuditError(Exception):
    """Base exception for validation and audit failures."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConstraintEngineError(FieldAuditError):
    """The validator could not evaluate a constraint (not a bad-input condition)."""
    pass


class AuditWriteError(FieldAuditError):
    """Appending rows to the audit store failed."""

    def __init__(self, message: str, *, path: str, **kwargs) -> None:
        self.path = path
        super().__init__(message, **kwargs)


class AuditReadError(FieldAuditError):
    """The audit store could not be read back for reporting."""

    def __init__(self, message: str, *, path: str, **kwargs) -> None:
        self.path = path
        super().__init__(message, **kwargs)
