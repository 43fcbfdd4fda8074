"""Classification of TikTok API responses into success or one of the error kinds.

TikTok signals failures two ways: the HTTP status, and an application
``code`` embedded in the JSON body. A successful response may omit ``code``
entirely, so only a present, non-zero code marks a 2xx response as failed.
Any status of 300 or above is a failure whatever the body says.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Protocol

from .exceptions import AccessTokenExpired, AccessTokenInvalid, ApiError, TikTokError
from .logging import get_logger
from .reporting import ErrorReporter, describe_api_error

logger = get_logger(__name__)

ACCESS_TOKEN_EXPIRED_CODE = 40102
ACCESS_TOKEN_INVALID_CODE = 40700


class HttpResponse(Protocol):
    status_code: int
    text: str


class OutcomeKind(str, enum.Enum):
    SUCCESS = "success"
    EXPIRED = "expired"
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ResponseOutcome:
    kind: OutcomeKind
    status_code: int
    code: Any = None
    message: Any = None
    payload: Any = None
    parsed: bool = True

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def error_text(self) -> str:
        """``"{code} -- {message}"``, or the raw body when it was not JSON."""
        if not self.parsed:
            return self.message
        return f"{_text(self.code)} -- {_text(self.message)}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_code(value: Any) -> Any:
    """Normalise integral floats (``40102.0``); any other value is compared as sent."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_error(status_code: int, code: Any) -> bool:
    if status_code >= 300:
        return True
    if code is None:
        return False
    return isinstance(code, bool) or code != 0


def classify_response(status_code: int, body: str | None) -> ResponseOutcome:
    """Classify a raw response without side effects."""
    raw = body or ""
    try:
        payload = json.loads(raw)
    except ValueError:
        return ResponseOutcome(
            kind=OutcomeKind.ERROR,
            status_code=status_code,
            message=raw,
            parsed=False,
        )

    fields = payload if isinstance(payload, dict) else {}
    code = _as_code(fields.get("code"))
    message = fields.get("message")

    if not is_error(status_code, code):
        kind = OutcomeKind.SUCCESS
    elif code == ACCESS_TOKEN_EXPIRED_CODE:
        kind = OutcomeKind.EXPIRED
    elif code == ACCESS_TOKEN_INVALID_CODE:
        kind = OutcomeKind.INVALID
    else:
        kind = OutcomeKind.ERROR

    return ResponseOutcome(
        kind=kind,
        status_code=status_code,
        code=code,
        message=message,
        payload=payload,
    )


def raise_for_outcome(outcome: ResponseOutcome, reporter: ErrorReporter) -> Any:
    """Return the parsed payload of a successful outcome, raise otherwise.

    Unrecognised failures are sent to ``reporter`` before raising; expired
    and invalid tokens are left for the caller to handle.
    """
    if outcome.ok:
        return outcome.payload

    error_kwargs = {
        "code": outcome.code,
        "upstream_message": outcome.message,
        "status_code": outcome.status_code,
    }
    error: TikTokError
    if outcome.kind is OutcomeKind.EXPIRED:
        error = AccessTokenExpired(outcome.error_text, **error_kwargs)
    elif outcome.kind is OutcomeKind.INVALID:
        error = AccessTokenInvalid(outcome.error_text, **error_kwargs)
    else:
        if outcome.parsed:
            report = describe_api_error(_text(outcome.code), _text(outcome.message))
        else:
            report = describe_api_error("null", outcome.message)
        logger.debug(
            "TikTok API request failed with status %s", outcome.status_code,
            extra={"tiktok_code": outcome.code},
        )
        reporter(report)
        error = ApiError(outcome.error_text, **error_kwargs)
    raise error


def check_response_errors(response: HttpResponse, reporter: ErrorReporter) -> Any:
    """Classify ``response`` and return its parsed JSON body when it succeeded."""
    outcome = classify_response(response.status_code, response.text)
    return raise_for_outcome(outcome, reporter)
