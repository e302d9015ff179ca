"""
REST client for the Acuity Scheduling API.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import structlog

from .config import DEFAULT_BASE_URL, ClientSettings
from .errors import (
    AcuityAuthError,
    AcuityConflictError,
    AcuityError,
    AcuityErrorCode,
    AcuityForbiddenError,
    AcuityNetworkError,
    AcuityNotFoundError,
    AcuityRateLimitError,
    AcuityServerError,
    AcuityTimeoutError,
    AcuityValidationError,
)
from .models import AppointmentRequestDefaults
from .resources import (
    AppointmentsResource,
    AvailabilityResource,
    CalendarsResource,
    WebhooksResource,
)

logger = structlog.get_logger()

_STATUS_CODES = {
    400: AcuityErrorCode.BAD_REQUEST,
    401: AcuityErrorCode.UNAUTHORIZED,
    403: AcuityErrorCode.FORBIDDEN,
    404: AcuityErrorCode.NOT_FOUND,
    405: AcuityErrorCode.METHOD_NOT_ALLOWED,
    409: AcuityErrorCode.CONFLICT,
    422: AcuityErrorCode.INVALID_DATA,
    429: AcuityErrorCode.TOO_MANY_REQUESTS,
}

_STATUS_ERRORS: dict[int, type[AcuityError]] = {
    401: AcuityAuthError,
    403: AcuityForbiddenError,
    404: AcuityNotFoundError,
    409: AcuityConflictError,
    422: AcuityValidationError,
    429: AcuityRateLimitError,
}


def map_status_to_code(status: int) -> str:
    """Derive an error code from an HTTP status when Acuity sends none."""
    if status in _STATUS_CODES:
        return _STATUS_CODES[status].value
    if status >= 500:
        return AcuityErrorCode.SERVER_ERROR.value
    return AcuityErrorCode.UNKNOWN_ERROR.value


def normalize_query_value(value: Any) -> str:
    """
    Format a query value the way Acuity expects.

    Examples:
        >>> normalize_query_value(True)
        'true'
        >>> normalize_query_value([1, 2, 3])
        '1,2,3'
    """
    if isinstance(value, (list, tuple)):
        return ",".join(normalize_query_value(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(query: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop unset values and normalize the rest."""
    if not query:
        return {}
    return {
        key: normalize_query_value(value)
        for key, value in query.items()
        if value is not None
    }


def create_error(status: int, payload: Any) -> AcuityError:
    """Map an error response to the matching :class:`AcuityError` subclass."""
    normalized = payload if isinstance(payload, dict) else {}
    code = normalized.get("error") or map_status_to_code(status)
    message = normalized.get("message")

    if status in _STATUS_ERRORS:
        error_cls = _STATUS_ERRORS[status]
    elif status >= 500:
        error_cls = AcuityServerError
    elif status >= 400:
        error_cls = AcuityValidationError
    else:
        error_cls = AcuityError

    return error_cls(status=status, code=code, message=message, payload=payload)


def _settings_options(settings: ClientSettings | None, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Merge :class:`ClientSettings` with explicit keyword overrides."""
    settings = settings or ClientSettings()
    if not settings.user_id or not settings.api_key:
        raise ValueError("ACUITY_USER_ID and ACUITY_API_KEY must be set")

    options: dict[str, Any] = {
        "user_id": settings.user_id,
        "api_key": settings.api_key,
        "base_url": settings.base_url,
        "timeout_s": settings.timeout_s,
    }
    options.update(kwargs)
    return options


class _BaseClient:
    """Request building and response mapping shared by both clients."""

    def __init__(
        self,
        user_id: str | int,
        base_url: str,
        timeout_s: float,
        appointment_defaults: AppointmentRequestDefaults | None,
    ):
        self.user_id = str(user_id)
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

        self.appointments = AppointmentsResource(self, appointment_defaults)
        self.availability = AvailabilityResource(self)
        self.calendars = CalendarsResource(self)
        self.webhooks = WebhooksResource(self)

    def _request_kwargs(self, query: Mapping[str, Any] | None, body: Any) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"params": build_query(query)}
        if body is not None:
            kwargs["json"] = body
        return kwargs

    def _transport_error(self, e: httpx.HTTPError, method: str, path: str) -> AcuityError:
        logger.warning("acuity_request_failed", method=method, path=path, error=str(e))
        if isinstance(e, httpx.TimeoutException):
            return AcuityTimeoutError(
                status=0,
                code=AcuityErrorCode.TIMEOUT.value,
                payload=e,
            )
        return AcuityNetworkError(
            status=0,
            code=AcuityErrorCode.NETWORK.value,
            message=str(e) or None,
            payload=e,
        )

    def _handle_response(self, response: httpx.Response, method: str, path: str) -> Any:
        payload = self._parse_payload(response)
        if response.is_error:
            logger.warning(
                "acuity_request_failed",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise create_error(response.status_code, payload)

        return payload

    def _parse_payload(self, response: httpx.Response) -> Any:
        """Decode JSON bodies; wrap plain text as ``{"message": text}``."""
        if response.status_code == 204:
            return None

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError:
                return {}

        text = response.text
        return {"message": text} if text else {}


class AcuityClient(_BaseClient):
    """
    Client for the Acuity Scheduling REST API.

    Authenticates with HTTP Basic auth (user ID and API key) and exposes the
    API through resource attributes.

    Args:
        user_id: Acuity user ID (Basic auth username)
        api_key: Acuity API key (Basic auth password)
        base_url: REST base URL. Default: https://acuityscheduling.com/api/v1
        timeout_s: Request timeout in seconds. Default: 30.0
        appointment_defaults: Query flags applied to appointment create,
            cancel and reschedule calls
        transport: Optional httpx transport (useful for testing)

    Example:
        >>> with AcuityClient(user_id=123, api_key="key") as acuity:
        ...     for appointment in acuity.appointments.list(max=10):
        ...         print(appointment["id"])
    """

    def __init__(
        self,
        user_id: str | int,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 30.0,
        appointment_defaults: AppointmentRequestDefaults | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(user_id, base_url, timeout_s, appointment_defaults)
        self._http = httpx.Client(
            base_url=self.base_url,
            auth=httpx.BasicAuth(self.user_id, api_key),
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        **kwargs: Any,
    ) -> "AcuityClient":
        """
        Build a client from :class:`ClientSettings` (environment by default).

        Keyword arguments override the matching settings.

        Raises:
            ValueError: If user ID or API key are not configured
        """
        return cls(**_settings_options(settings, kwargs))

    def __enter__(self) -> "AcuityClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def request(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON payload.

        Raises:
            AcuityError: A status-specific subclass for error responses
            AcuityTimeoutError: If the request timed out
            AcuityNetworkError: On other transport failures
        """
        kwargs = self._request_kwargs(query, body)

        logger.debug("acuity_request", method=method, path=path)
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise self._transport_error(e, method, path) from e

        return self._handle_response(response, method, path)


class AsyncAcuityClient(_BaseClient):
    """
    Asynchronous client for the Acuity Scheduling REST API.

    Takes the same arguments as :class:`AcuityClient`; every resource method
    returns an awaitable.

    Example:
        >>> async with AsyncAcuityClient(user_id=123, api_key="key") as acuity:
        ...     calendars = await acuity.calendars.list()
    """

    def __init__(
        self,
        user_id: str | int,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 30.0,
        appointment_defaults: AppointmentRequestDefaults | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(user_id, base_url, timeout_s, appointment_defaults)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(self.user_id, api_key),
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        **kwargs: Any,
    ) -> "AsyncAcuityClient":
        """Async counterpart of :meth:`AcuityClient.from_settings`."""
        return cls(**_settings_options(settings, kwargs))

    async def __aenter__(self) -> "AsyncAcuityClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON payload.

        Raises:
            AcuityError: A status-specific subclass for error responses
            AcuityTimeoutError: If the request timed out
            AcuityNetworkError: On other transport failures
        """
        kwargs = self._request_kwargs(query, body)

        logger.debug("acuity_request", method=method, path=path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise self._transport_error(e, method, path) from e

        return self._handle_response(response, method, path)
