"""Unit tests for the status service client."""

from collections.abc import Callable

import httpx
import pytest

from delivery_dashboard.fetch.client import PollbotClient
from delivery_dashboard.fetch.errors import ServiceErrorClass, StatusServiceError
from delivery_dashboard.fetch.protocols import StatusServiceClient
from delivery_dashboard.store.models import (
    CheckStatus,
    ReleaseInfo,
    ReleaseInfoError,
)


BASE_URL = "https://pollbot.test/v1"

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler) -> PollbotClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PollbotClient(base_url=BASE_URL + "/", http_client=http)


def _routes(routes: dict[str, httpx.Response]) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return routes.get(str(request.url), httpx.Response(404, json={"message": "nf"}))

    return handler


class TestPollbotClient:
    """Tests for PollbotClient."""

    def test_satisfies_protocol(self) -> None:
        """The client implements the service protocol."""
        assert isinstance(PollbotClient(), StatusServiceClient)

    def test_strips_trailing_slash(self) -> None:
        """The base URL is normalized."""
        assert PollbotClient(base_url=BASE_URL + "/").base_url == BASE_URL

    @pytest.mark.asyncio
    async def test_get_service_version(self) -> None:
        """The version endpoint is parsed into ServiceVersion."""
        client = _client(
            _routes(
                {
                    f"{BASE_URL}/__version__": httpx.Response(
                        200,
                        json={
                            "name": "pollbot",
                            "version": "1.4.3",
                            "commit": "78539afa",
                            "source": "https://github.com/mozilla/PollBot.git",
                            "build": "https://circleci.com/gh/mozilla/PollBot/1",
                        },
                    )
                }
            )
        )
        info = await client.get_service_version()
        assert info.version == "1.4.3"
        assert info.commit_url == "https://github.com/mozilla/PollBot/commit/78539afa"

    @pytest.mark.asyncio
    async def test_get_ongoing_versions(self) -> None:
        """Channel versions are returned as a plain mapping."""
        payload = {"nightly": "63.0a1", "beta": "62.0b5", "release": "60.0"}
        client = _client(
            _routes(
                {
                    f"{BASE_URL}/thunderbird/ongoing-versions": httpx.Response(
                        200, json=payload
                    )
                }
            )
        )
        assert await client.get_ongoing_versions("thunderbird") == payload

    @pytest.mark.asyncio
    async def test_get_ongoing_versions_rejects_non_mapping(self) -> None:
        """A list payload is an invalid payload."""
        client = _client(lambda request: httpx.Response(200, json=["60.0"]))
        with pytest.raises(StatusServiceError) as exc_info:
            await client.get_ongoing_versions("thunderbird")
        assert exc_info.value.error_class == ServiceErrorClass.INVALID_PAYLOAD

    @pytest.mark.asyncio
    async def test_get_release_info(self) -> None:
        """Release info keeps the service's check order."""
        payload = {
            "product": "thunderbird",
            "version": "60.0",
            "channel": "release",
            "checks": [
                {
                    "title": "Archive Release",
                    "url": f"{BASE_URL}/thunderbird/60.0/archive",
                    "actionable": True,
                },
                {
                    "title": "Release notes",
                    "url": f"{BASE_URL}/thunderbird/60.0/bedrock/release-notes",
                    "actionable": False,
                },
            ],
        }
        client = _client(
            _routes({f"{BASE_URL}/thunderbird/60.0": httpx.Response(200, json=payload)})
        )
        info = await client.get_release_info("thunderbird", "60.0")
        assert isinstance(info, ReleaseInfo)
        assert info.titles == ("Archive Release", "Release notes")

    @pytest.mark.asyncio
    async def test_get_release_info_error_body(self) -> None:
        """An error body from the service becomes ReleaseInfoError."""
        client = _client(
            lambda request: httpx.Response(
                404, json={"status": 404, "message": "Invalid version number: 1"}
            )
        )
        info = await client.get_release_info("thunderbird", "1")
        assert info == ReleaseInfoError(message="Invalid version number: 1")

    @pytest.mark.asyncio
    async def test_check_status(self) -> None:
        """A check endpoint is parsed into CheckResult."""
        url = f"{BASE_URL}/thunderbird/60.0/archive"
        client = _client(
            _routes(
                {
                    url: httpx.Response(
                        200,
                        json={
                            "status": "missing",
                            "message": "No archive found",
                            "link": "https://archive.mozilla.org/",
                        },
                    )
                }
            )
        )
        result = await client.check_status(url)
        assert result.status == CheckStatus.MISSING
        assert result.link == "https://archive.mozilla.org/"

    @pytest.mark.asyncio
    async def test_check_status_uses_service_message_on_error(self) -> None:
        """A check error reports the service's message."""
        client = _client(
            lambda request: httpx.Response(503, json={"message": "Bedrock is down"})
        )
        with pytest.raises(StatusServiceError) as exc_info:
            await client.check_status(f"{BASE_URL}/thunderbird/60.0/bedrock")
        error = exc_info.value
        assert error.error_class == ServiceErrorClass.HTTP_5XX
        assert error.message == "Bedrock is down"
        assert error.status_code == 503

    @pytest.mark.asyncio
    async def test_http_error_without_json(self) -> None:
        """A non-JSON error response is classified by status."""
        client = _client(lambda request: httpx.Response(404, text="Not Found"))
        with pytest.raises(StatusServiceError) as exc_info:
            await client.check_status(f"{BASE_URL}/thunderbird/60.0/archive")
        assert exc_info.value.error_class == ServiceErrorClass.HTTP_4XX
        assert exc_info.value.message == "Status service returned 404"

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """A 200 with a non-JSON body is INVALID_JSON."""
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(StatusServiceError) as exc_info:
            await client.get_service_version()
        assert exc_info.value.error_class == ServiceErrorClass.INVALID_JSON

    @pytest.mark.asyncio
    async def test_invalid_payload(self) -> None:
        """A JSON body of the wrong shape is INVALID_PAYLOAD."""
        client = _client(lambda request: httpx.Response(200, json={"state": "ok"}))
        with pytest.raises(StatusServiceError) as exc_info:
            await client.check_status(f"{BASE_URL}/thunderbird/60.0/archive")
        assert exc_info.value.error_class == ServiceErrorClass.INVALID_PAYLOAD

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Transport timeouts are classified as TIMEOUT."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(StatusServiceError) as exc_info:
            await _client(handler).get_service_version()
        assert exc_info.value.error_class == ServiceErrorClass.TIMEOUT

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """Connection failures are classified as CONNECTION_ERROR."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StatusServiceError) as exc_info:
            await _client(handler).get_ongoing_versions("thunderbird")
        error = exc_info.value
        assert error.error_class == ServiceErrorClass.CONNECTION_ERROR
        assert error.url == f"{BASE_URL}/thunderbird/ongoing-versions"

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self) -> None:
        """A caller-provided HTTP client stays open."""
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )
        async with PollbotClient(base_url=BASE_URL, http_client=http):
            pass
        assert not http.is_closed
        await http.aclose()
