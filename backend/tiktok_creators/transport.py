"""HTTP transport used by the TikTok client."""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Protocol, TextIO

import requests

from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
}
DEFAULT_TIMEOUT = 30


class Transport(Protocol):
    """Anything able to issue a TikTok request and return the raw response."""

    def send(
        self,
        method: str,
        url: str,
        *,
        body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Return an object exposing ``status_code`` and ``text``."""


def merge_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(DEFAULT_HEADERS)
    merged.update(headers or {})
    return merged


def build_request_kwargs(
    body: Mapping[str, Any] | None,
    params: Mapping[str, Any] | None,
    headers: Mapping[str, str] | None,
) -> dict[str, Any]:
    """Keyword arguments for ``requests``; empty bodies and queries are left out."""
    return {
        "data": json.dumps(body) if body else None,
        "params": dict(params) if params else None,
        "headers": merge_headers(headers),
    }


def trace_hook(stream: TextIO | None = None):
    """Build a ``requests`` response hook that prints the exchange to ``stream``."""

    def hook(response: requests.Response, *args: Any, **kwargs: Any) -> requests.Response:
        out = stream if stream is not None else sys.stdout
        request = response.request
        print(f"-> {request.method} {request.url}", file=out)
        for name, value in request.headers.items():
            print(f"-> {name}: {value}", file=out)
        if request.body:
            body = request.body.decode("utf-8") if isinstance(request.body, bytes) else request.body
            print(f"-> {body}", file=out)
        print(f"<- {response.status_code} {response.reason}", file=out)
        for name, value in response.headers.items():
            print(f"<- {name}: {value}", file=out)
        print(f"<- {response.text}", file=out)
        return response

    return hook


class RequestsTransport:
    """``requests``-backed transport."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        log_requests: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        trace_stream: TextIO | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.log_requests = log_requests
        self._trace_stream = trace_stream

    def send(
        self,
        method: str,
        url: str,
        *,
        body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        kwargs = build_request_kwargs(body, params, headers)
        if self.log_requests:
            kwargs["hooks"] = {"response": [trace_hook(self._trace_stream)]}
        logger.debug("TikTok %s %s", method.upper(), url)
        return self.session.request(method.upper(), url, timeout=self.timeout, **kwargs)
