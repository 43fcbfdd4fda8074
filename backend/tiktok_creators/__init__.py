"""TikTok Business API client for creator authorization and insights."""

from .client import TikTokApiClient, instance
from .config import ClientConfig, Environment, load_config, resolve_environment
from .exceptions import AccessTokenExpired, AccessTokenInvalid, ApiError, TikTokError
from .models import CreatorAuthorization, CreatorInsights
from .reporting import ErrorReporter
from .responses import OutcomeKind, ResponseOutcome, classify_response
from .transport import RequestsTransport, Transport

__all__ = [
    "TikTokApiClient",
    "instance",
    "ClientConfig",
    "Environment",
    "load_config",
    "resolve_environment",
    "TikTokError",
    "ApiError",
    "AccessTokenExpired",
    "AccessTokenInvalid",
    "CreatorAuthorization",
    "CreatorInsights",
    "ErrorReporter",
    "OutcomeKind",
    "ResponseOutcome",
    "classify_response",
    "RequestsTransport",
    "Transport",
]
