"""TikTok-specific exception hierarchy."""

from __future__ import annotations


class TikTokError(Exception):
    """Base error for TikTok client failures."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        upstream_message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.upstream_message = upstream_message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ApiError(TikTokError):
    """Raised for any TikTok API error without a dedicated subclass."""


class AccessTokenExpired(TikTokError):
    """Raised when TikTok reports code 40102 (the access token has expired)."""


class AccessTokenInvalid(TikTokError):
    """Raised when TikTok reports code 40700 (the access token is invalid)."""
