import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any
from unittest import TestCase
from unittest.mock import Mock, patch

import tiktok_creators.client as client_module
from tiktok_creators.client import (
    AUTHORIZE_CREATOR_ENDPOINT_URL,
    CREATOR_INSIGHTS_ENDPOINT_URL,
    TikTokApiClient,
    instance,
)
from tiktok_creators.config import ClientConfig, Environment
from tiktok_creators.exceptions import AccessTokenExpired, ApiError
from tiktok_creators.models import CreatorAuthorization
from tiktok_creators.transport import RequestsTransport

FROZEN_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

CONFIG = ClientConfig(
    tcm_user_id=7033500955417116674,
    access_token="fea5d0aea970561bf880c54ae93e47706ba93849",
    app_id="7033660228885282818",
    app_secret="0ad68fb99c0756e77a3bb87557bc61533dd95a1f",
    environment=Environment.TEST,
)


class StubTransport:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self.body = body if isinstance(body, str) else json.dumps(body or {})
        self.calls: list[dict[str, Any]] = []

    def send(self, method, url, *, body=None, params=None, headers=None):
        self.calls.append(
            {"method": method, "url": url, "body": body, "params": params, "headers": headers}
        )
        return SimpleNamespace(status_code=self.status_code, text=self.body)


class TokenEndpointTests(TestCase):
    creator_id = "93a7dea1-c49b-47e3-ba54-715c63aeac93"
    scope = "user.info.basic,tcm.order.update,user.insights.creator,video.list"

    def setUp(self):
        self.transport = StubTransport(
            body={
                "creator_id": self.creator_id,
                "access_token": "j3f09j2309j3f029jf093li3fjlk3fj90",
                "refresh_token": "3f0-29j203j23p09j2f309j23f093f3f90j3f03f",
                "expires": 86400,
                "refresh_expires": 31536000,
                "scope": self.scope,
            }
        )
        self.reporter = Mock()
        self.client = TikTokApiClient(CONFIG, transport=self.transport, reporter=self.reporter)

    @patch.object(client_module, "_utcnow", return_value=FROZEN_NOW)
    def test_authorize_creator_returns_authorization(self, mock_now):
        authorization = self.client.authorize_creator("ox4o87jx34o87x4oj78x3o7m8x2mo7ct")

        self.assertEqual(
            authorization,
            CreatorAuthorization(
                creator_id=self.creator_id,
                access_token="j3f09j2309j3f029jf093li3fjlk3fj90",
                refresh_token="3f0-29j203j23p09j2f309j23f093f3f90j3f03f",
                access_token_expiration=FROZEN_NOW + timedelta(seconds=86400),
                refresh_token_expiration=FROZEN_NOW + timedelta(seconds=31536000),
                access_scope=self.scope,
            ),
        )
        mock_now.assert_called_once()
        self.reporter.assert_not_called()

    def test_authorize_creator_posts_authorization_code_grant(self):
        self.client.authorize_creator("auth-code")

        call = self.transport.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], AUTHORIZE_CREATOR_ENDPOINT_URL)
        self.assertEqual(
            call["body"],
            {
                "client_id": CONFIG.app_id,
                "client_secret": CONFIG.app_secret,
                "grant_type": "authorization_code",
                "auth_code": "auth-code",
            },
        )
        self.assertIsNone(call["params"])

    @patch.object(client_module, "_utcnow", return_value=FROZEN_NOW)
    def test_refresh_access_token_posts_refresh_grant(self, _mock_now):
        authorization = self.client.refresh_access_token("refresh-me")

        call = self.transport.calls[0]
        self.assertEqual(call["url"], AUTHORIZE_CREATOR_ENDPOINT_URL)
        self.assertEqual(
            call["body"],
            {
                "client_id": CONFIG.app_id,
                "client_secret": CONFIG.app_secret,
                "grant_type": "refresh_token",
                "refresh_token": "refresh-me",
            },
        )
        self.assertEqual(authorization.access_token_expiration, FROZEN_NOW + timedelta(days=1))
        self.assertEqual(
            authorization.refresh_token_expiration, FROZEN_NOW + timedelta(days=365)
        )
        self.assertEqual(
            authorization.scopes,
            ["user.info.basic", "tcm.order.update", "user.insights.creator", "video.list"],
        )

    def test_missing_expiry_raises_api_error(self):
        transport = StubTransport(body={"creator_id": "c1", "access_token": "a", "scope": "s1"})
        client = TikTokApiClient(CONFIG, transport=transport, reporter=self.reporter)
        with self.assertRaisesRegex(ApiError, "expires"):
            client.authorize_creator("code")

    def test_expired_token_propagates(self):
        transport = StubTransport(body={"code": 40102, "message": "token expired"})
        client = TikTokApiClient(CONFIG, transport=transport, reporter=self.reporter)
        with self.assertRaises(AccessTokenExpired):
            client.refresh_access_token("stale")
        self.reporter.assert_not_called()


class CreatorInsightsTests(TestCase):
    def setUp(self):
        self.reporter = Mock()

    def _client(self, transport: StubTransport) -> TikTokApiClient:
        return TikTokApiClient(CONFIG, transport=transport, reporter=self.reporter)

    def test_creator_insights_returns_profile(self):
        transport = StubTransport(
            body={
                "data": {
                    "display_name": "tiktok_display_name",
                    "handle_name": "tiktok_handle_name",
                    "profile_image": "https://example.com/avatar.jpg",
                    "followers_count": 3848,
                }
            }
        )
        insights = self._client(transport).creator_insights("creator-1", "creator-token")

        self.assertEqual(insights.display_name, "tiktok_display_name")
        self.assertEqual(insights.handle, "tiktok_handle_name")
        self.assertEqual(insights.profile_image, "https://example.com/avatar.jpg")
        self.assertEqual(insights.followers_count, 3848)

    def test_creator_insights_sends_fields_and_creator_token(self):
        transport = StubTransport(body={"data": {"display_name": "Jane"}})
        self._client(transport).creator_insights("creator-1", "creator-token")

        call = transport.calls[0]
        self.assertEqual(call["method"], "GET")
        self.assertEqual(call["url"], CREATOR_INSIGHTS_ENDPOINT_URL)
        self.assertEqual(
            call["params"],
            {
                "creator_id": "creator-1",
                "fields": '["profile_image", "display_name", "followers_count", '
                '"audience_countries", "audience_genders", "audience_ages", '
                '"audience_locales", "handle_name"]',
            },
        )
        self.assertEqual(call["headers"], {"Access-Token": "creator-token"})
        self.assertIsNone(call["body"])

    def test_handle_falls_back_to_display_name(self):
        transport = StubTransport(
            body={
                "data": {
                    "display_name": "Jane",
                    "followers_count": 100,
                    "profile_image": "http://x/y.png",
                }
            }
        )
        insights = self._client(transport).creator_insights("creator-1", "creator-token")
        self.assertEqual(insights.handle, "Jane")

    def test_plain_text_error_is_reported(self):
        transport = StubTransport(status_code=503, body="Service Unavailable")
        with self.assertRaises(ApiError) as ctx:
            self._client(transport).creator_insights("creator-1", "creator-token")
        self.assertEqual(str(ctx.exception), "Service Unavailable")
        self.reporter.assert_called_once()


class DefaultTransportTests(TestCase):
    def test_log_requests_reaches_default_transport(self):
        client = TikTokApiClient(replace(CONFIG, log_requests=True))
        self.assertIsInstance(client._transport, RequestsTransport)
        self.assertTrue(client._transport.log_requests)

    def test_default_transport_does_not_trace(self):
        self.assertFalse(TikTokApiClient(CONFIG)._transport.log_requests)


class SharedInstanceTests(TestCase):
    def setUp(self):
        instance.cache_clear()
        self.addCleanup(instance.cache_clear)

    @patch.object(client_module, "load_config", return_value=CONFIG)
    def test_instance_is_cached_per_environment(self, mock_load):
        first = instance("staging")
        second = instance("staging")

        self.assertIs(first, second)
        self.assertIs(first.config, CONFIG)
        mock_load.assert_called_once_with("staging", log_requests=False)

    @patch.object(client_module, "load_config", return_value=CONFIG)
    def test_instance_passes_log_requests(self, mock_load):
        instance("production", log_requests=True)
        mock_load.assert_called_once_with("production", log_requests=True)
