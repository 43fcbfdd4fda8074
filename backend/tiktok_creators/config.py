from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Mapping

from .logging import get_logger, log_credential_source

logger = get_logger(__name__)


class Environment(str, enum.Enum):
    PRODUCTION = "production"
    TEST = "test"
    LOCAL = "local"


@dataclass(frozen=True)
class CredentialNames:
    """Environment variable names holding one TikTok app's credentials."""

    tcm_user_id: str
    access_token: str
    app_id: str
    app_secret: str


# The local app has no creator marketplace account of its own and shares the test one.
CREDENTIAL_NAMES: dict[Environment, CredentialNames] = {
    Environment.PRODUCTION: CredentialNames(
        tcm_user_id="TIKTOK_CREATOR_MARKETPLACE_USER_ID_PRODUCTION",
        access_token="TIKTOK_BUSINESS_ACCESS_TOKEN_PRODUCTION",
        app_id="TIKTOK_APP_ID_PRODUCTION",
        app_secret="TIKTOK_APP_SECRET_PRODUCTION",
    ),
    Environment.TEST: CredentialNames(
        tcm_user_id="TIKTOK_CREATOR_MARKETPLACE_USER_ID_TEST",
        access_token="TIKTOK_BUSINESS_ACCESS_TOKEN_TEST",
        app_id="TIKTOK_APP_ID_TEST",
        app_secret="TIKTOK_APP_SECRET_TEST",
    ),
    Environment.LOCAL: CredentialNames(
        tcm_user_id="TIKTOK_CREATOR_MARKETPLACE_USER_ID_TEST",
        access_token="TIKTOK_BUSINESS_ACCESS_TOKEN_LOCAL",
        app_id="TIKTOK_APP_ID_LOCAL",
        app_secret="TIKTOK_APP_SECRET_LOCAL",
    ),
}


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Resolved credentials for a single TikTok app."""

    tcm_user_id: int
    access_token: str
    app_id: str
    app_secret: str
    environment: Environment
    log_requests: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.environment, Environment):
            raise ValueError(f"Unknown TikTok environment: {self.environment!r}")
        if not isinstance(self.tcm_user_id, int):
            raise ValueError("tcm_user_id must be an integer")


def resolve_environment(indicator: str | None) -> Environment:
    """Map a deployment environment name onto the TikTok app to use.

    Test and staging deployments share the test app, development uses the
    local app and anything unrecognised falls back to local.
    """
    name = (indicator or "").strip().lower()
    if name in ("test", "staging"):
        return Environment.TEST
    if name == "development":
        return Environment.LOCAL
    if name == "production":
        return Environment.PRODUCTION
    return Environment.LOCAL


def _coerce_user_id(raw: str | None) -> int:
    if not raw or not raw.strip():
        return 0
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"TikTok creator marketplace user id must be numeric, got {raw!r}") from exc


def load_config(
    indicator: str | None,
    *,
    log_requests: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Build a ClientConfig for ``indicator`` from environment variables."""
    environ = os.environ if environ is None else environ
    environment = resolve_environment(indicator)
    names = CREDENTIAL_NAMES[environment]
    values: dict[str, str | None] = {}
    for field_name in ("tcm_user_id", "access_token", "app_id", "app_secret"):
        variable = getattr(names, field_name)
        values[field_name] = environ.get(variable)
        log_credential_source(logger, variable, values[field_name])

    logger.debug("Resolved TikTok environment %s from %r", environment.value, indicator)
    return ClientConfig(
        tcm_user_id=_coerce_user_id(values["tcm_user_id"]),
        access_token=values["access_token"] or "",
        app_id=values["app_id"] or "",
        app_secret=values["app_secret"] or "",
        environment=environment,
        log_requests=log_requests,
    )
