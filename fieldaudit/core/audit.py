"""
Audit store - appends one CSV row per field failure for later analysis.

The store is append-only. Its header row is written exactly once, by the call
that creates the file. A single lock serializes the whole append (existence
check, open, header, rows, flush, close) so concurrent callers never
interleave rows.

Cross-process writers are not coordinated: two processes creating the store at
the same moment can both see it missing and both write a header.
"""

import csv
import io
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import IO, Generator, Sequence, Tuple

from .errors import AuditWriteError
from .outcome import FieldFailure

logger = logging.getLogger(__name__)

AUDIT_HEADER = ("timestamp", "struct_and_field_name", "error_tag")


def format_rfc3339(moment: datetime) -> str:
    """RFC 3339 at seconds precision; a zero UTC offset is written as "Z"."""
    text = moment.isoformat(timespec="seconds")
    if moment.utcoffset() == timedelta(0):
        return text[:-len("+00:00")] + "Z"
    return text


def rfc3339_now() -> str:
    """Current wall-clock time as RFC 3339 with the local UTC offset."""
    return format_rfc3339(datetime.now().astimezone())


class AuditLogger:
    """Appends field failures to a shared CSV store."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    @contextmanager
    def _locked_store(self) -> Generator[Tuple[IO[str], bool], None, None]:
        """
        Hold the store lock and yield (file, created).

        The lock is released and the file closed on every exit path.
        """
        with self._lock:
            created = not os.path.exists(self.path)
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                yield f, created

    def record_failures(self, failures: Sequence[FieldFailure]) -> None:
        """
        Append one row per failure. All rows share one timestamp.

        Rows are rendered in memory and written in a single write, so a call
        either appends all of its rows or raises.

        Raises:
            AuditWriteError: The store could not be opened or written.
        """
        if not failures:
            return

        timestamp = rfc3339_now()

        try:
            with self._locked_store() as (f, created):
                buffer = io.StringIO()
                writer = csv.writer(buffer, lineterminator="\n")
                if created:
                    writer.writerow(AUDIT_HEADER)
                writer.writerows(
                    (timestamp, failure.field_path, failure.tag) for failure in failures
                )

                f.write(buffer.getvalue())
                f.flush()
                os.fsync(f.fileno())
        except (OSError, csv.Error) as e:
            logger.error(f"Error writing audit store {self.path}: {e}")
            raise AuditWriteError(
                f"Failed to append {len(failures)} audit rows: {e}",
                path=self.path,
                details={"rows": len(failures)},
            ) from e

        logger.debug(f"Appended {len(failures)} audit rows to {self.path}")
