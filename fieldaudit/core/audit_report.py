"""
Audit report - reads the audit store back and summarizes failures.

Used by scripts/audit_report.py to answer which fields fail which rules and
how often.
"""

import csv
import os
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List

from .audit import AUDIT_HEADER
from .errors import AuditReadError


@dataclass(frozen=True)
class AuditRecord:
    timestamp: str
    struct_and_field_name: str
    error_tag: str


def read_audit_records(path: str) -> List[AuditRecord]:
    """
    Read every data row from the audit store.

    A missing store has no records. A store whose first row is not the
    expected header, or whose rows do not have three columns, is rejected.

    Raises:
        AuditReadError: The store exists but cannot be parsed.
    """
    if not os.path.exists(path):
        return []

    records = []
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                return []
            if tuple(header) != AUDIT_HEADER:
                raise AuditReadError(f"Unexpected audit header: {header}", path=path)

            for line_no, row in enumerate(reader, start=2):
                if len(row) != len(AUDIT_HEADER):
                    raise AuditReadError(
                        f"Malformed audit row at line {line_no}: {row}",
                        path=path,
                        details={"line": line_no},
                    )
                records.append(AuditRecord(*row))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise AuditReadError(f"Failed to read audit store: {e}", path=path) from e

    return records


def summarize_audit_records(records: List[AuditRecord]) -> Dict[str, Any]:
    """Count failures per field, per rule tag and per field/tag pair."""
    by_field = Counter(r.struct_and_field_name for r in records)
    by_tag = Counter(r.error_tag for r in records)
    by_field_and_tag = Counter(f"{r.struct_and_field_name}:{r.error_tag}" for r in records)
    timestamps = sorted(r.timestamp for r in records)

    return {
        "total_failures": len(records),
        "by_field": dict(by_field.most_common()),
        "by_tag": dict(by_tag.most_common()),
        "by_field_and_tag": dict(by_field_and_tag.most_common()),
        "first_seen": timestamps[0] if timestamps else None,
        "last_seen": timestamps[-1] if timestamps else None,
    }
