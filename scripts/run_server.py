#!/usr/bin/env python3
"""
Server entrypoint - loads .env, validates configuration and starts uvicorn.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports (fieldaudit/ and util/ are both in project root)
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn  # noqa: E402

from fieldaudit.core.config import ensure_audit_log_directory, get_host, get_log_level, get_port, validate_config  # noqa: E402
from util.logging import logger  # noqa: E402


def main():
    """Validate configuration and serve the API."""
    issues = validate_config()
    if issues:
        for issue in issues:
            logger.error(f"Configuration error: {issue}")
        return 1

    ensure_audit_log_directory()
    logger.info("Starting application...")

    try:
        uvicorn.run(
            "fieldaudit.api.main:app",
            host=get_host(),
            port=get_port(),
            log_level=get_log_level().lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
