import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import httpx  # type: ignore
from aiolimiter import AsyncLimiter

from zoom_webinars.config.constants.zoom import (
    DEFAULT_BASE_URL,
    OAUTH_TOKEN_URL,
    ZoomAuthType,
)
from zoom_webinars.config.settings import ZoomSettings
from zoom_webinars.exceptions.webinar_exceptions import (
    DecodingFailedError,
    InvalidArgumentError,
    RemoteRequestFailedError,
)
from zoom_webinars.sources.client.http.http_client import HTTPClient
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.http.http_response import HTTPResponse
from zoom_webinars.sources.client.iclient import IClient

logger = logging.getLogger(__name__)

# ======================================================================
# STATIC TOKEN CLIENT
# ======================================================================

class ZoomRESTClientViaToken(HTTPClient):
    """
    Zoom REST client using a pre-generated OAuth token.
    """

    def __init__(self, base_url: str, token: str, token_type: str = "Bearer", **http_options) -> None:
        super().__init__(token, token_type, **http_options)
        self.base_url = base_url.rstrip("/")
        self.headers.update({"Content-Type": "application/json"})

    def get_base_url(self) -> str:
        return self.base_url


# ======================================================================
# SERVER-TO-SERVER OAUTH CLIENT
# ======================================================================

class ZoomRESTClientViaServerToServer(HTTPClient):
    """
    Zoom REST client using Server-to-Server OAuth.
    The access token is fetched on the first request and reused afterwards.
    """

    def __init__(
        self,
        account_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        token_url: str = OAUTH_TOKEN_URL,
        **http_options,
    ) -> None:
        super().__init__(token="", token_type="Bearer", **http_options)

        self.base_url = base_url.rstrip("/")
        self.token_url = token_url
        self.account_id = account_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.access_token: Optional[str] = None
        self.expires_at: Optional[float] = None
        self._token_lock = asyncio.Lock()

        self.headers.update({"Content-Type": "application/json"})

    def get_base_url(self) -> str:
        return self.base_url

    def _token_is_valid(self) -> bool:
        if not self.access_token:
            return False
        return self.expires_at is None or time.time() < self.expires_at

    async def _get_access_token(self, cancel_event: Optional[asyncio.Event] = None) -> str:
        """Fetch the account-credentials token, again once it is about to expire."""
        async with self._token_lock:
            if self._token_is_valid():
                return self.access_token

            encoded = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode()
            req = HTTPRequest(
                method="POST",
                url=self.token_url,
                headers={
                    "Authorization": f"Basic {encoded}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                query_params={"grant_type": "account_credentials", "account_id": self.account_id},
            )
            resp = await super().execute(req, cancel_event=cancel_event)
            if not resp.is_success:
                raise RemoteRequestFailedError(
                    f"Zoom token request failed with HTTP {resp.status}",
                    status_code=resp.status,
                    body=resp.text(),
                    method=req.method,
                    url=req.url,
                )

            try:
                data = resp.json()
                token = data.get("access_token")
                expires_in = data.get("expires_in")
                expires_at = time.time() + int(expires_in) - 10 if expires_in else None
            except (ValueError, TypeError, AttributeError) as e:
                raise DecodingFailedError(f"Failed to parse token response: {e}", body=resp.text()) from e
            if not token:
                raise DecodingFailedError("Token response has no access_token", body=resp.text())

            self.access_token = token
            self.expires_at = expires_at
            self.headers["Authorization"] = f"Bearer {token}"
            logger.debug("Fetched Zoom server-to-server access token for account %s", self.account_id)
            return token

    async def execute(
        self,
        request: HTTPRequest,
        cancel_event: Optional[asyncio.Event] = None,
        **kwargs
    ) -> HTTPResponse:
        await self._get_access_token(cancel_event)
        return await super().execute(request, cancel_event=cancel_event, **kwargs)


# ======================================================================
# CONFIG CLASSES
# ======================================================================

@dataclass
class ZoomTokenConfig:
    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    max_retries: int = 0
    transport: Optional[httpx.AsyncBaseTransport] = None

    def create_client(self) -> ZoomRESTClientViaToken:
        return ZoomRESTClientViaToken(
            self.base_url,
            self.token,
            timeout=self.timeout,
            max_retries=self.max_retries,
            transport=self.transport,
        )


@dataclass
class ZoomServerToServerConfig:
    account_id: str
    client_id: str
    client_secret: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    max_retries: int = 0
    transport: Optional[httpx.AsyncBaseTransport] = None

    def create_client(self) -> ZoomRESTClientViaServerToServer:
        return ZoomRESTClientViaServerToServer(
            self.account_id,
            self.client_id,
            self.client_secret,
            self.base_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
            transport=self.transport,
        )


# ======================================================================
# TOP-LEVEL CLIENT WRAPPER
# ======================================================================

ClientType = Union[
    ZoomRESTClientViaServerToServer,
    ZoomRESTClientViaToken,
]

ConfigType = Union[
    ZoomServerToServerConfig,
    ZoomTokenConfig,
]


class ZoomClient(IClient):
    def __init__(self, client: ClientType) -> None:
        self.client = client

    def get_client(self) -> ClientType:
        return self.client

    @classmethod
    def build_with_config(cls, config: ConfigType) -> "ZoomClient":
        return cls(config.create_client())

    @classmethod
    def build_from_settings(cls, settings: ZoomSettings) -> "ZoomClient":
        """Pick the auth client described by the settings."""
        http = settings.http
        http_options = {
            "timeout": http.timeout,
            "max_retries": http.max_retries,
            "base_delay": http.base_delay,
            "max_delay": http.max_delay,
        }
        if http.rate_limit:
            http_options["rate_limiter"] = AsyncLimiter(http.rate_limit, 1)

        if settings.auth_type == ZoomAuthType.SERVER_TO_SERVER:
            missing = [
                name for name in ("account_id", "client_id", "client_secret")
                if not getattr(settings, name)
            ]
            if missing:
                raise InvalidArgumentError(
                    f"Server-to-server auth requires {', '.join(missing)}", argument=missing[0],
                )
            return cls(
                ZoomRESTClientViaServerToServer(
                    settings.account_id,
                    settings.client_id,
                    settings.client_secret,
                    settings.base_url,
                    **http_options,
                )
            )

        if not settings.access_token:
            raise InvalidArgumentError("Token auth requires access_token", argument="access_token")
        return cls(ZoomRESTClientViaToken(settings.base_url, settings.access_token, **http_options))

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "ZoomClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
