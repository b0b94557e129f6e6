"""Field failures and the tagged outcome of one pipeline run."""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class FieldFailure:
    field_path: str  # <SchemaClassName>.<attribute>
    tag: str  # tag of the violated constraint


@dataclass(frozen=True)
class Ok:
    """Every declared constraint was satisfied."""


@dataclass(frozen=True)
class ValidationFailed:
    """One or more constraints were violated."""
    failures: Tuple[FieldFailure, ...]


@dataclass(frozen=True)
class Internal:
    """The request could not be fully processed; cause is for operators only."""
    cause: BaseException


Outcome = Union[Ok, ValidationFailed, Internal]
