"""
Structured diagnostic logging for the validation service.

This is the operator channel: validation outcomes, audit store problems and
internal failures are reported here. Nothing logged here reaches the caller.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredLogger:
    """Structured logger for validation and audit operations."""

    def __init__(self, name: str = "fieldaudit", level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(handler)

    def set_level(self, level: str) -> None:
        self.logger.setLevel(level)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_validation_passed(self, schema: str):
        """Log a request that satisfied every constraint."""
        self.log_operation("validation", "ok", {"schema": schema})

    def log_validation_failed(self, schema: str, failures: Sequence[Any]):
        """Log failing field paths and rule tags. Field values are never logged."""
        log_details = {
            "schema": schema,
            "failures": [f"{f.field_path}:{f.tag}" for f in failures],
            "failure_count": len(failures)
        }
        self.log_operation("validation", "rejected", log_details)

    def log_malformed_input(self, route: str, reason: str):
        """Log a body that could not be bound to its schema."""
        self.log_operation("binding", "malformed", {"route": route, "reason": reason[:200]})

    def log_internal_error(self, schema: str, identifiers: Dict[str, Any], cause: BaseException,
                           failures: Optional[Sequence[Any]] = None):
        """
        Log an internal failure with the request's identifying attributes.

        When the audit store failed, the validation failures it could not
        persist are included so they are not lost.
        """
        log_details = {
            "schema": schema,
            "identifiers": sanitize_payload(identifiers),
            "cause": f"{type(cause).__name__}: {cause}"
        }
        if failures:
            log_details["unrecorded_failures"] = [f"{f.field_path}:{f.tag}" for f in failures]

        self.log_operation("pipeline", "internal_error", log_details, level=logging.ERROR)

    def log_audit_write(self, path: str, rows: int, status: str = "success"):
        """Log an audit store append."""
        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation("audit.append", status, {"path": path, "rows": rows}, level=level)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str, exc_info: bool = False) -> None:
        """Log an error message."""
        self.logger.error(message, exc_info=exc_info)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, max_length: int = 100, sensitive_fields: List[str] = None) -> Any:
    """Truncate long strings and redact sensitive keys before logging."""
    if sensitive_fields is None:
        sensitive_fields = ['password', 'secret', 'token']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if k in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, max_length, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        return payload[:max_length] + "..." if len(payload) > max_length else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, max_length, sensitive_fields) for item in payload]
    else:
        return payload
