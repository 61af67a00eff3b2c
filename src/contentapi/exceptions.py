from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class ContentApiError(Exception):
    """Root of every error raised by this package."""


class InvalidFilterError(ContentApiError, ValueError):
    """A lookup or listing filter is missing its discriminating fields."""

    def __init__(self, detail: str = "") -> None:
        msg = "parameter filter is invalid"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.detail = detail


class ConfigurationError(ContentApiError, ValueError):
    pass


@dataclass
class APIError(ContentApiError):
    """
    Error reported by the Content Delivery API.

    Mirrors the Contentful error payload:
        {
          "sys": {"type": "Error", "id": "NotFound"},
          "message": "The resource could not be found.",
          "details": {"type": "Entry", "id": "..."},
          "requestId": "..."
        }
    """

    status_code: int
    detail: str = ""
    code: Optional[str] = None          # e.g. "NotFound"
    request_id: Optional[str] = None
    details: Any = None                 # structured details block
    response_body: Any = None           # raw parsed JSON of the response

    def __post_init__(self) -> None:
        msg = self.detail or self.code or f"HTTP {self.status_code}"
        super().__init__(msg)

    @property
    def retryable(self) -> bool:
        """Whether a retry might make sense (for caller backoff logic)."""
        return self.status_code == 429 or 500 <= self.status_code < 600


# -------------------------------------------------
# Typed client-side exceptions
# -------------------------------------------------

class BadRequestError(APIError):
    pass


class InvalidQueryError(APIError):
    pass


class AccessTokenInvalidError(APIError):
    pass


class AccessDeniedError(APIError):
    pass


class NotFoundError(APIError):
    pass


class VersionMismatchError(APIError):
    pass


class RateLimitError(APIError):
    pass


class ServerError(APIError):
    pass


class BadGatewayError(APIError):
    pass


class ServiceUnavailableError(APIError):
    pass


class GatewayTimeoutError(APIError):
    pass


# -------------------------------------------------
# Mapping helpers
# -------------------------------------------------

# Map Contentful `sys.id` → specific client exception
_CODE_TO_EXCEPTION = {
    "BadRequest": BadRequestError,
    "InvalidQuery": InvalidQueryError,
    "AccessTokenInvalid": AccessTokenInvalidError,
    "AccessTokenRequired": AccessTokenInvalidError,
    "AccessDenied": AccessDeniedError,
    "NotFound": NotFoundError,
    "VersionMismatch": VersionMismatchError,
    "RateLimitExceeded": RateLimitError,
    "ServerError": ServerError,
    "BadGateway": BadGatewayError,
    "ServiceUnavailable": ServiceUnavailableError,
}

# Fallback mapping by HTTP status code
_STATUS_TO_EXCEPTION = {
    400: BadRequestError,
    401: AccessTokenInvalidError,
    403: AccessDeniedError,
    404: NotFoundError,
    409: VersionMismatchError,
    422: InvalidQueryError,
    429: RateLimitError,
    500: ServerError,
    502: BadGatewayError,
    503: ServiceUnavailableError,
    504: GatewayTimeoutError,
}


def _pick_exception_class(status_code: int, code: Optional[str]) -> type[APIError]:
    if code and code in _CODE_TO_EXCEPTION:
        return _CODE_TO_EXCEPTION[code]
    if status_code in _STATUS_TO_EXCEPTION:
        return _STATUS_TO_EXCEPTION[status_code]
    return APIError


def _format_details(details: Any) -> str:
    """
    Turn the Contentful `details.errors` list into a readable string.

    Invalid queries look like:
        {"errors": [{"name": "unknown", "path": ["fields", "foo"], "details": "..."}]}
    """
    if not isinstance(details, dict):
        return ""
    errors = details.get("errors")
    if not isinstance(errors, list):
        return ""

    parts = []
    for item in errors:
        if isinstance(item, dict):
            path = item.get("path") or []
            path_str = ".".join(str(p) for p in path) if isinstance(path, list) else str(path)
            msg = item.get("details") or item.get("name") or str(item)
            parts.append(f"{path_str}: {msg}" if path_str else str(msg))
        else:
            parts.append(str(item))
    return "; ".join(parts)


def error_from_response(response) -> APIError:
    """
    Build a concrete APIError subclass from a `requests.Response`.

    If the body is not JSON or doesn't carry the `sys.type == "Error"`
    envelope, a generic error is still built from the status code.
    """

    status_code = response.status_code

    body: Any
    try:
        body = response.json()
    except ValueError:
        # Non-JSON error
        return _pick_exception_class(status_code, None)(
            status_code=status_code,
            detail=response.text or f"HTTP {status_code}",
        )

    sys_block = body.get("sys") if isinstance(body, dict) else None
    if not isinstance(sys_block, dict) or sys_block.get("type") != "Error":
        return _pick_exception_class(status_code, None)(
            status_code=status_code,
            detail=str(body),
            response_body=body,
        )

    code = sys_block.get("id")
    detail = body.get("message", "")
    details = body.get("details")

    formatted = _format_details(details)
    if formatted:
        detail = f"{detail}: {formatted}" if detail else formatted

    exc_cls = _pick_exception_class(status_code, code)

    return exc_cls(
        status_code=status_code,
        detail=detail,
        code=code,
        request_id=body.get("requestId"),
        details=details,
        response_body=body,
    )


def raise_for_api_error(response) -> None:
    """
    Raise a suitable APIError subclass if the response signals failure.

    - HTTP 2xx/3xx → returns silently.
    - HTTP >= 400 → raises APIError subclass.
    """
    if response.status_code >= 400:
        raise error_from_response(response)
