"""
Schema validator - evaluates a schema's constraint table against one instance.

Every field in the table is evaluated. Within a field the constraints run in
declaration order and stop at the first violation, so each failing field is
reported once, tagged with the rule it broke.
"""

import logging
from typing import Any, List

from .constraints import REQUIRED, check_constraint
from .errors import ConstraintEngineError
from .outcome import FieldFailure, Internal, Ok, Outcome, ValidationFailed
from .schemas import RequestSchema

logger = logging.getLogger(__name__)


class SchemaValidator:
    """Evaluates RequestSchema instances against their declared constraints."""

    def validate(self, instance: Any) -> Outcome:
        """
        Validate a decoded schema instance.

        Returns:
            Ok when every constraint holds, ValidationFailed carrying every
            failing field otherwise, or Internal when the constraints could
            not be evaluated at all.
        """
        try:
            failures = self._collect_failures(instance)
        except ConstraintEngineError as e:
            logger.error(f"Validator fault on {type(instance).__name__}: {e}")
            return Internal(cause=e)
        except Exception as e:
            logger.error(f"Unexpected validator fault on {type(instance).__name__}: {e}", exc_info=True)
            return Internal(cause=e)

        if failures:
            return ValidationFailed(failures=tuple(failures))
        return Ok()

    def _collect_failures(self, instance: Any) -> List[FieldFailure]:
        if not isinstance(instance, RequestSchema):
            raise ConstraintEngineError(
                f"Cannot validate {type(instance).__name__}: not a RequestSchema"
            )

        schema_name = type(instance).__name__
        failures = []

        for field_name, field_constraints in instance.constraints.items():
            if field_name not in type(instance).model_fields:
                raise ConstraintEngineError(
                    f"Constraint table names unknown field {schema_name}.{field_name}",
                    details={"schema": schema_name, "field": field_name},
                )

            value = getattr(instance, field_name)
            for constraint in field_constraints:
                # Absent values are only judged by "required"
                if value is None and constraint.tag != REQUIRED:
                    continue
                if not check_constraint(constraint, value):
                    failures.append(FieldFailure(
                        field_path=f"{schema_name}.{field_name}",
                        tag=constraint.tag,
                    ))
                    break

        return failures
