from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .exceptions import ApiError


def _require(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None:
        raise ApiError(f"TikTok response is missing '{key}'")
    return value


def _seconds(data: dict[str, Any], key: str) -> timedelta:
    value = _require(data, key)
    try:
        return timedelta(seconds=int(value))
    except (TypeError, ValueError) as exc:
        raise ApiError(f"TikTok response has a non-numeric '{key}': {value!r}") from exc


@dataclass(frozen=True, slots=True)
class CreatorAuthorization:
    creator_id: str
    access_token: str
    refresh_token: str
    access_token_expiration: datetime
    refresh_token_expiration: datetime
    access_scope: str

    @property
    def scopes(self) -> list[str]:
        return [scope.strip() for scope in (self.access_scope or "").split(",") if scope.strip()]

    @classmethod
    def from_dict(cls, data: dict[str, Any], now: datetime) -> "CreatorAuthorization":
        """Build from a token endpoint payload; ``now`` anchors both expirations."""
        return cls(
            creator_id=data.get("creator_id"),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            access_token_expiration=now + _seconds(data, "expires"),
            refresh_token_expiration=now + _seconds(data, "refresh_expires"),
            access_scope=data.get("scope"),
        )


@dataclass(frozen=True, slots=True)
class CreatorInsights:
    display_name: str
    handle: str
    followers_count: int
    profile_image: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CreatorInsights":
        creator = data.get("data")
        if creator is None:
            creator = {}
        elif not isinstance(creator, dict):
            raise ApiError(f"Unexpected TikTok response: {data!r}")
        display_name = creator.get("display_name")
        handle_name = creator.get("handle_name")
        return cls(
            display_name=display_name,
            handle=handle_name if handle_name is not None else display_name,
            followers_count=creator.get("followers_count"),
            profile_image=creator.get("profile_image"),
        )
