from __future__ import annotations

import logging


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger."""
    return logging.getLogger(name or __name__)


def log_credential_source(
    logger: logging.Logger,
    label: str,
    value: str | None,
    level_success: int = logging.DEBUG,
    level_failure: int = logging.WARNING,
) -> None:
    """
    Structured helper for reporting credential lookups.

    Avoid logging the credential value; only the source label is emitted.
    """
    if value:
        logger.log(level_success, "Credential %s supplied a value", label)
    else:
        logger.log(level_failure, "Credential %s is not set", label)
