"""
Service configuration from environment variables.

Module-level values are defaults. The accessor functions read the environment
on every call so tests and entrypoints can override them.
"""

import logging
import os
from pathlib import Path

# Audit store location (CSV, append-only)
DEFAULT_AUDIT_LOG_PATH = "validation_errors.csv"

# HTTP server binding
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = "1323"

# Diagnostic logging
DEFAULT_LOG_LEVEL = "INFO"

# Version string
VERSION = "1.0.0"


def get_audit_log_path() -> str:
    """Path of the audit CSV store."""
    return os.getenv("AUDIT_LOG_PATH", DEFAULT_AUDIT_LOG_PATH)


def get_host() -> str:
    return os.getenv("HOST", DEFAULT_HOST)


def get_port() -> int:
    return int(os.getenv("PORT", DEFAULT_PORT))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_audit_log_directory() -> None:
    """Ensure the directory holding the audit store exists."""
    Path(get_audit_log_path()).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate service configuration and return any issues."""
    issues = []

    try:
        port = get_port()
    except ValueError:
        issues.append(f"PORT must be an integer: {os.getenv('PORT')}")
    else:
        if not 0 < port < 65536:
            issues.append(f"PORT out of range: {port}")

    level = get_log_level()
    if not isinstance(logging.getLevelName(level), int):
        issues.append(f"Invalid LOG_LEVEL: {level}")

    if Path(get_audit_log_path()).is_dir():
        issues.append(f"AUDIT_LOG_PATH points at a directory: {get_audit_log_path()}")

    return issues
