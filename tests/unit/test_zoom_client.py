"""
Tests for the Zoom auth clients and the ZoomClient factory.
"""

import asyncio
import base64
import time

import httpx  # type: ignore
import pytest  # type: ignore

from tests.fixtures.zoom_api import BASE_URL, TOKEN_URL, FakeZoomAPI, make_webinars
from zoom_webinars.config.constants.zoom import ZoomAuthType
from zoom_webinars.config.settings import HTTPSettings, ZoomSettings
from zoom_webinars.exceptions.webinar_exceptions import DecodingFailedError, InvalidArgumentError
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.zoom.zoom import (
    ZoomClient,
    ZoomRESTClientViaServerToServer,
    ZoomRESTClientViaToken,
    ZoomServerToServerConfig,
)
from zoom_webinars.sources.external.zoom.webinars import ZoomWebinarsDataSource


def s2s_client(zoom_api: FakeZoomAPI) -> ZoomRESTClientViaServerToServer:
    return ZoomRESTClientViaServerToServer(
        "acct-1", "client-id", "client-secret",
        base_url=BASE_URL,
        token_url=TOKEN_URL,
        transport=zoom_api.transport(),
    )


@pytest.mark.unit
class TestServerToServer:
    @pytest.mark.asyncio
    async def test_token_fetched_once_and_reused(self, zoom_api: FakeZoomAPI):
        zoom_api.webinars = make_webinars(3)
        async with ZoomClient(s2s_client(zoom_api)) as client:
            webinars = ZoomWebinarsDataSource(client)
            await webinars.get_all("me")
            await webinars.get_all("me", page=2, records_per_page=1)

        assert zoom_api.token_requests == 1
        token_request = zoom_api.requests[0]
        expected = base64.b64encode(b"client-id:client-secret").decode()
        assert token_request.method == "POST"
        assert token_request.headers["Authorization"] == f"Basic {expected}"
        assert token_request.url.params["grant_type"] == "account_credentials"
        assert token_request.url.params["account_id"] == "acct-1"
        assert all(r.headers["Authorization"] == "Bearer s2s-token-1" for r in zoom_api.api_requests)

    @pytest.mark.asyncio
    async def test_expiry_recorded_from_expires_in(self, zoom_api: FakeZoomAPI):
        client = s2s_client(zoom_api)
        before = time.time()
        try:
            await client.execute(HTTPRequest(url=f"{BASE_URL}/users/me/webinars", query_params={"page_size": "1", "page": "1"}))
        finally:
            await client.close()

        # expires_in is 3600; the token is renewed a little early
        assert before + 3600 - 10 <= client.expires_at <= time.time() + 3600

    @pytest.mark.asyncio
    async def test_expired_token_is_fetched_again(self, zoom_api: FakeZoomAPI):
        zoom_api.webinars = make_webinars(1)
        async with ZoomClient(s2s_client(zoom_api)) as client:
            webinars = ZoomWebinarsDataSource(client)
            await webinars.get_all("me")

            client.get_client().expires_at = time.time() - 1
            await webinars.get_all("me")

        assert zoom_api.token_requests == 2
        assert zoom_api.api_requests[0].headers["Authorization"] == "Bearer s2s-token-1"
        assert zoom_api.api_requests[1].headers["Authorization"] == "Bearer s2s-token-2"

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_token(self, zoom_api: FakeZoomAPI):
        client = s2s_client(zoom_api)
        try:
            await asyncio.gather(*(
                client.execute(HTTPRequest(url=f"{BASE_URL}/users/me/webinars", query_params={"page_size": "1", "page": "1"}))
                for _ in range(3)
            ))
        finally:
            await client.close()

        assert zoom_api.token_requests == 1

    @pytest.mark.asyncio
    async def test_token_response_without_token(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"expires_in": 3600})

        client = ZoomRESTClientViaServerToServer(
            "acct-1", "id", "secret", base_url=BASE_URL, token_url=TOKEN_URL,
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(DecodingFailedError):
            await client.execute(HTTPRequest(url=f"{BASE_URL}/users/me/webinars"))
        await client.close()


@pytest.mark.unit
class TestBuildFromSettings:
    def test_token_settings(self):
        settings = ZoomSettings(access_token="tok", base_url="https://api.zoom.test/v2/")

        client = ZoomClient.build_from_settings(settings).get_client()

        assert isinstance(client, ZoomRESTClientViaToken)
        assert client.get_base_url() == "https://api.zoom.test/v2"
        assert client.headers["Authorization"] == "Bearer tok"

    def test_token_settings_require_token(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ZoomClient.build_from_settings(ZoomSettings())
        assert exc_info.value.argument == "access_token"

    def test_server_to_server_settings(self):
        settings = ZoomSettings(
            auth_type=ZoomAuthType.SERVER_TO_SERVER,
            account_id="acct",
            client_id="id",
            client_secret="secret",
            http=HTTPSettings(max_retries=2, rate_limit=10),
        )

        client = ZoomClient.build_from_settings(settings).get_client()

        assert isinstance(client, ZoomRESTClientViaServerToServer)
        assert client.account_id == "acct"
        assert client.max_retries == 2
        assert client.rate_limiter is not None

    def test_server_to_server_settings_report_missing_credentials(self):
        settings = ZoomSettings(auth_type=ZoomAuthType.SERVER_TO_SERVER, account_id="acct")

        with pytest.raises(InvalidArgumentError) as exc_info:
            ZoomClient.build_from_settings(settings)

        assert exc_info.value.argument == "client_id"
        assert "client_secret" in str(exc_info.value)

    def test_build_with_config(self):
        config = ZoomServerToServerConfig(account_id="a", client_id="b", client_secret="c", max_retries=1)

        client = ZoomClient.build_with_config(config).get_client()

        assert isinstance(client, ZoomRESTClientViaServerToServer)
        assert client.max_retries == 1
