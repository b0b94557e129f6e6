#!/usr/bin/env python3
"""
Audit report CLI - summarizes which fields fail which rules.
"""

import argparse
import json
import sys
from pathlib import Path

import dotenv
dotenv.load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from fieldaudit.core.audit_report import read_audit_records, summarize_audit_records  # noqa: E402
from fieldaudit.core.config import get_audit_log_path  # noqa: E402
from fieldaudit.core.errors import AuditReadError  # noqa: E402


def format_summary(summary: dict, path: str) -> str:
    lines = [f"Audit store: {path}", f"Total failures: {summary['total_failures']}"]
    if not summary["total_failures"]:
        return "\n".join(lines)

    lines.append(f"First seen: {summary['first_seen']}")
    lines.append(f"Last seen:  {summary['last_seen']}")

    for title, key in (("By field", "by_field"), ("By rule", "by_tag"), ("By field and rule", "by_field_and_tag")):
        lines.append("")
        lines.append(f"{title}:")
        for name, count in summary[key].items():
            lines.append(f"  {count:>6}  {name}")

    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Summarize validation failures recorded in the audit store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                           # Summarize AUDIT_LOG_PATH
  %(prog)s errors.csv --json         # Machine-readable summary
        """
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Audit CSV to read (default: AUDIT_LOG_PATH or validation_errors.csv)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON"
    )

    args = parser.parse_args(argv)
    path = args.path or get_audit_log_path()

    try:
        records = read_audit_records(path)
    except AuditReadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    summary = summarize_audit_records(records)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(format_summary(summary, path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
