"""Async HTTP client for the Pollbot status service."""

import time
from http import HTTPStatus
from typing import TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from delivery_dashboard import __version__
from delivery_dashboard.config.constants import (
    COMPONENT_FETCH,
    DEFAULT_POLLBOT_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from delivery_dashboard.fetch.errors import ServiceErrorClass, StatusServiceError
from delivery_dashboard.store.models import (
    CheckResult,
    ReleaseInfo,
    ReleaseInfoError,
    ServiceVersion,
)


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class PollbotClient:
    """Read-only client for the status service.

    Every method issues a single GET and returns parsed models. Failures of
    any kind (transport, HTTP status, JSON, payload shape) are raised as
    StatusServiceError. No retries: the dashboard retries through its
    periodic refresh.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_POLLBOT_URL,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Status service root, e.g. ``https://host/v1``.
            timeout_seconds: Per-request timeout.
            http_client: Optional preconfigured httpx client (not closed by us).
        """
        self._base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers={
                "Accept": "application/json",
                "User-Agent": f"delivery-dashboard/{__version__}",
            },
        )
        self._log = logger.bind(component=COMPONENT_FETCH)

    @property
    def base_url(self) -> str:
        """Get the status service root URL."""
        return self._base_url

    async def __aenter__(self) -> "PollbotClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def get_service_version(self) -> ServiceVersion:
        """Fetch the status service build metadata."""
        url = f"{self._base_url}/__version__"
        return self._parse(ServiceVersion, await self._get_json(url), url)

    async def get_ongoing_versions(self, product: str) -> dict[str, str]:
        """Fetch the current version of each channel of a product.

        Args:
            product: Product name.

        Returns:
            Mapping of channel to version string.
        """
        url = f"{self._base_url}/{product}/ongoing-versions"
        payload = await self._get_json(url)
        if not isinstance(payload, dict) or not all(
            isinstance(key, str) and isinstance(value, str)
            for key, value in payload.items()
        ):
            raise StatusServiceError(
                ServiceErrorClass.INVALID_PAYLOAD,
                "Expected a mapping of channel to version",
                url,
            )
        return dict(payload)

    async def get_release_info(
        self, product: str, version: str
    ) -> ReleaseInfo | ReleaseInfoError:
        """Fetch the release info and check list for a version.

        The service answers unknown versions with an error body carrying a
        ``message``; that body is returned as ReleaseInfoError.

        Args:
            product: Product name.
            version: Version string.

        Returns:
            ReleaseInfo, or ReleaseInfoError when the service reports one.
        """
        url = f"{self._base_url}/{product}/{version}"
        payload = await self._get_json(url, accept_error_body=True)
        if _is_error_body(payload) and "checks" not in payload:
            return self._parse(ReleaseInfoError, payload, url)
        return self._parse(ReleaseInfo, payload, url)

    async def check_status(self, url: str) -> CheckResult:
        """Fetch the result of a single check.

        Args:
            url: Check URL as listed in the release info.

        Returns:
            The check result.
        """
        return self._parse(CheckResult, await self._get_json(url), url)

    async def _get_json(self, url: str, accept_error_body: bool = False) -> object:
        """GET a URL and decode its JSON body.

        Args:
            url: URL to fetch.
            accept_error_body: Return the body of a 4xx/5xx response when it
                carries a ``message``.

        Returns:
            Decoded JSON.

        Raises:
            StatusServiceError: On any failure.
        """
        log = self._log.bind(url=url)
        start_time_ns = time.perf_counter_ns()

        try:
            response = await self._http.get(url)
        except httpx.TimeoutException as e:
            log.warning("service_request_failed", error_class="TIMEOUT")
            raise StatusServiceError(
                ServiceErrorClass.TIMEOUT, f"Request timed out: {e}", url
            ) from e
        except httpx.ConnectError as e:
            log.warning("service_request_failed", error_class="CONNECTION_ERROR")
            raise StatusServiceError(
                ServiceErrorClass.CONNECTION_ERROR, f"Connection failed: {e}", url
            ) from e
        except httpx.HTTPError as e:
            log.warning("service_request_failed", error_class="UNKNOWN")
            raise StatusServiceError(
                ServiceErrorClass.UNKNOWN, f"Request failed: {e}", url
            ) from e

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.debug(
            "service_request_complete",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        error_class = _classify_status(response.status_code)
        try:
            payload = response.json()
        except ValueError as e:
            if error_class is not None:
                raise StatusServiceError(
                    error_class,
                    f"Status service returned {response.status_code}",
                    url,
                    status_code=response.status_code,
                ) from e
            raise StatusServiceError(
                ServiceErrorClass.INVALID_JSON,
                f"Invalid JSON response: {e}",
                url,
                status_code=response.status_code,
            ) from e

        if error_class is None:
            return payload
        if accept_error_body and _is_error_body(payload):
            return payload

        message = (
            payload["message"]
            if _is_error_body(payload)
            else f"Status service returned {response.status_code}"
        )
        raise StatusServiceError(
            error_class, str(message), url, status_code=response.status_code
        )

    def _parse(self, model: type[ModelT], payload: object, url: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            self._log.warning(
                "service_payload_invalid",
                url=url,
                model=model.__name__,
                error_count=e.error_count(),
            )
            raise StatusServiceError(
                ServiceErrorClass.INVALID_PAYLOAD,
                f"Unexpected {model.__name__} payload: {e.error_count()} error(s)",
                url,
            ) from e


def _classify_status(status_code: int) -> ServiceErrorClass | None:
    if status_code < HTTPStatus.BAD_REQUEST:
        return None
    if status_code < HTTPStatus.INTERNAL_SERVER_ERROR:
        return ServiceErrorClass.HTTP_4XX
    return ServiceErrorClass.HTTP_5XX


def _is_error_body(payload: object) -> bool:
    return isinstance(payload, dict) and "message" in payload
