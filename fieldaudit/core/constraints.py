"""
Field constraints and the checks that evaluate them.

A constraint is a tag plus an optional parameter, e.g. Constraint("gt", 0).
Each tag maps to one check function in CHECKS; the validator looks checks up
by tag, so the tables declared on schemas stay plain data.

Bound tags (gt, gte, lt, lte, min, max, len) compare numbers by value and
strings or collections by length.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .errors import ConstraintEngineError

REQUIRED = "required"

NUMERIC_PATTERN = re.compile(r"[-+]?[0-9]+(?:\.[0-9]+)?")
UUID_RFC4122_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Constraint:
    """One declarative rule attached to a schema field."""
    tag: str
    param: Any = None

    def __str__(self) -> str:
        if self.param is None:
            return self.tag
        return f"{self.tag}={self.param}"


def _measure(value: Any) -> Any:
    """Numbers are measured by value, everything else by length."""
    if isinstance(value, bool):
        raise TypeError("boolean values have no magnitude")
    if isinstance(value, (int, float)):
        return value
    return len(value)


def _check_required(value: Any, param: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


def _check_gt(value: Any, param: Any) -> bool:
    return _measure(value) > param


def _check_gte(value: Any, param: Any) -> bool:
    return _measure(value) >= param


def _check_lt(value: Any, param: Any) -> bool:
    return _measure(value) < param


def _check_lte(value: Any, param: Any) -> bool:
    return _measure(value) <= param


def _check_len(value: Any, param: Any) -> bool:
    return _measure(value) == param


def _require_str(value: Any, tag: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"'{tag}' applies to strings, got {type(value).__name__}")
    return value


def _check_numeric(value: Any, param: Any) -> bool:
    return NUMERIC_PATTERN.fullmatch(_require_str(value, "numeric")) is not None


def _check_uuid_rfc4122(value: Any, param: Any) -> bool:
    return UUID_RFC4122_PATTERN.fullmatch(_require_str(value, "uuid_rfc4122")) is not None


def _check_oneof(value: Any, param: Any) -> bool:
    return value in param


CHECKS: Dict[str, Callable[[Any, Any], bool]] = {
    REQUIRED: _check_required,
    "gt": _check_gt,
    "gte": _check_gte,
    "lt": _check_lt,
    "lte": _check_lte,
    "min": _check_gte,
    "max": _check_lte,
    "len": _check_len,
    "numeric": _check_numeric,
    "uuid_rfc4122": _check_uuid_rfc4122,
    "oneof": _check_oneof,
}


def check_constraint(constraint: Constraint, value: Any) -> bool:
    """
    Evaluate one constraint against a value.

    Returns:
        True if the value satisfies the constraint, False if it violates it.

    Raises:
        ConstraintEngineError: The tag is unknown or the check could not be
            applied to the value (a fault in the rule table, not bad input).
    """
    check: Optional[Callable[[Any, Any], bool]] = CHECKS.get(constraint.tag)
    if check is None:
        raise ConstraintEngineError(
            f"Unknown constraint tag: {constraint.tag}",
            details={"constraint": str(constraint)},
        )

    try:
        return bool(check(value, constraint.param))
    except (TypeError, ValueError) as e:
        raise ConstraintEngineError(
            f"Constraint '{constraint}' could not be evaluated: {e}",
            details={"constraint": str(constraint), "value_type": type(value).__name__},
        ) from e
