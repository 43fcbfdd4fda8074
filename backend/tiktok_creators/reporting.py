"""Operational reporting for TikTok API failures nobody expects."""

from __future__ import annotations

from typing import Protocol

from .logging import get_logger

logger = get_logger(__name__)


class ErrorReporter(Protocol):
    def __call__(self, message: str) -> None:
        ...


def log_error_reporter(message: str) -> None:
    """Default reporter: hand the message to the ``tiktok_creators.reporting`` logger."""
    logger.error(message)


def describe_api_error(code: object, message: object) -> str:
    return (
        "There was an error with the TikTok API -- "
        f"Error Code: {code} - Error Message: {message}"
    )
