"""Client for the TikTok Business API creator endpoints (authorization and insights)."""

from __future__ import annotations

import functools
from datetime import datetime, timezone
from typing import Any, Mapping

from .config import ClientConfig, Environment, load_config
from .exceptions import ApiError
from .logging import get_logger
from .models import CreatorAuthorization, CreatorInsights
from .reporting import ErrorReporter, log_error_reporter
from .responses import check_response_errors
from .transport import RequestsTransport, Transport

logger = get_logger(__name__)

# API Docs: https://ads.tiktok.com/marketing_api/docs?id=1712130383437825
CREATOR_INSIGHTS_ENDPOINT_URL = "https://business-api.tiktok.com/open_api/v1.2/creator/get/"
# API Docs: https://ads.tiktok.com/marketing_api/docs?id=1712126292364289
AUTHORIZE_CREATOR_ENDPOINT_URL = (
    "https://business-api.tiktok.com/open_api/oauth2/token/?business=tt_user"
)

CREATOR_INSIGHTS_FIELDS = (
    '["profile_image", "display_name", "followers_count", "audience_countries", '
    '"audience_genders", "audience_ages", "audience_locales", "handle_name"]'
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TikTokApiClient:
    """TikTok creator marketplace client (authorize_creator, refresh_access_token, creator_insights).

    Build one with ``instance()`` or from a resolved ``ClientConfig``; the
    transport and error reporter can be swapped for tests.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Transport | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self.config = config
        self._transport = transport or RequestsTransport(log_requests=config.log_requests)
        self._reporter = reporter or log_error_reporter

    @property
    def environment(self) -> Environment:
        return self.config.environment

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def authorize_creator(self, auth_code: str) -> CreatorAuthorization:
        """Exchange a creator's authorization code for access and refresh tokens."""
        return self._request_token("authorization_code", auth_code=auth_code)

    def refresh_access_token(self, refresh_token: str) -> CreatorAuthorization:
        """Renew a creator's access token using their refresh token."""
        return self._request_token("refresh_token", refresh_token=refresh_token)

    def creator_insights(self, creator_id: str, creator_access_token: str) -> CreatorInsights:
        payload = self._make_request(
            "GET",
            CREATOR_INSIGHTS_ENDPOINT_URL,
            params={"creator_id": creator_id, "fields": CREATOR_INSIGHTS_FIELDS},
            headers={"Access-Token": creator_access_token},
        )
        return CreatorInsights.from_dict(self._as_object(payload))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request_token(self, grant_type: str, **grant: str) -> CreatorAuthorization:
        body = {
            "client_id": self.config.app_id,
            "client_secret": self.config.app_secret,
            "grant_type": grant_type,
            **grant,
        }
        payload = self._make_request("POST", AUTHORIZE_CREATOR_ENDPOINT_URL, body=body)
        return CreatorAuthorization.from_dict(self._as_object(payload), now=_utcnow())

    def _make_request(
        self,
        method: str,
        url: str,
        *,
        body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        response = self._transport.send(method, url, body=body, params=params, headers=headers)
        return check_response_errors(response, self._reporter)

    def _as_object(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected TikTok response: {payload!r}")
        return payload


@functools.lru_cache(maxsize=None)
def instance(environment: str | None = None, *, log_requests: bool = False) -> TikTokApiClient:
    """Shared client for the deployment ``environment`` (e.g. "production", "staging")."""
    config = load_config(environment, log_requests=log_requests)
    logger.info("Using TikTok %s app", config.environment.value)
    return TikTokApiClient(config)
