"""
Validation pipeline - validator, then audit store on failure.

Collaborators are passed in at construction; nothing here is a module-level
singleton.
"""

from typing import Optional

from util.logging import StructuredLogger, logger as default_logger

from .audit import AuditLogger
from .errors import AuditWriteError
from .outcome import Internal, Ok, Outcome
from .schemas import RequestSchema
from .validator import SchemaValidator


class ValidationPipeline:
    """Runs one decoded request through validation and auditing."""

    def __init__(self, validator: SchemaValidator, audit_logger: AuditLogger,
                 diagnostics: Optional[StructuredLogger] = None):
        self.validator = validator
        self.audit_logger = audit_logger
        self.diagnostics = diagnostics or default_logger

    def run(self, instance: RequestSchema) -> Outcome:
        """
        Validate an instance and record any failures.

        Returns:
            Ok without touching the audit store, ValidationFailed once its
            failures are persisted, or Internal when validation could not run
            or the failures could not be persisted.
        """
        schema_name = type(instance).__name__
        outcome = self.validator.validate(instance)

        if isinstance(outcome, Ok):
            self.diagnostics.log_validation_passed(schema_name)
            return outcome

        if isinstance(outcome, Internal):
            self.diagnostics.log_internal_error(schema_name, _identifiers(instance), outcome.cause)
            return outcome

        self.diagnostics.log_validation_failed(schema_name, outcome.failures)
        try:
            self.audit_logger.record_failures(outcome.failures)
        except AuditWriteError as e:
            self.diagnostics.log_audit_write(e.path, len(outcome.failures), status="failed")
            self.diagnostics.log_internal_error(
                schema_name, _identifiers(instance), e, failures=outcome.failures
            )
            return Internal(cause=e)

        self.diagnostics.log_audit_write(self.audit_logger.path, len(outcome.failures))
        return outcome


def _identifiers(instance) -> dict:
    if isinstance(instance, RequestSchema):
        return instance.identifiers()
    return {"type": type(instance).__name__}
