import asyncio
import logging
from typing import Any, Dict, Optional

import httpx  # type: ignore
from aiolimiter import AsyncLimiter

from zoom_webinars.exceptions.webinar_exceptions import (
    RemoteRequestFailedError,
    RequestCancelledError,
)
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.http.http_response import HTTPResponse
from zoom_webinars.sources.client.http.resilient_transport import ResilientHTTPTransport
from zoom_webinars.sources.client.iclient import IClient


class HTTPClient(IClient):
    """
    Async HTTP client with authentication and optional resilience features.

    Features:
    - Automatic Authorization header injection
    - Optional retry logic with exponential backoff
    - Automatic rate limiting when retries are enabled (default: 50 req/s)
    - Per-call cancellation through an asyncio.Event

    Every response is read inside a streaming context, so the underlying
    connection goes back to the pool on success, error and cancellation alike.

    Args:
        token: Authentication token
        token_type: Token type for Authorization header (default: "Bearer")
        timeout: Request timeout in seconds (default: 30.0)
        follow_redirects: Whether to follow HTTP redirects (default: True)
        rate_limiter: Optional AsyncLimiter. If None and max_retries > 0, defaults to 50 req/s
        max_retries: Number of retry attempts (default: 0 = disabled)
        base_delay: Initial delay for exponential backoff in seconds (default: 1.0)
        max_delay: Maximum delay cap in seconds (default: 32.0)
        transport: Explicit httpx transport, overrides the resilience options
        logger: Optional logger instance
    """
    def __init__(
        self,
        token: str,
        token_type: str = "Bearer",
        timeout: float = 30.0,
        follow_redirects: bool = True,
        rate_limiter: Optional[AsyncLimiter] = None,
        max_retries: int = 0,
        base_delay: float = 1.0,
        max_delay: float = 32.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ) -> None:
        self.headers: Dict[str, str] = {
            "Authorization": f"{token_type} {token}",
        }
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        if rate_limiter is None and max_retries > 0:
            rate_limiter = AsyncLimiter(50, 1)
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[httpx.AsyncClient] = None

    def get_client(self) -> "HTTPClient":
        """Get the client"""
        return self

    def _build_transport(self) -> Optional[httpx.AsyncBaseTransport]:
        if self.transport is not None:
            return self.transport
        if self.rate_limiter is not None or self.max_retries > 0:
            return ResilientHTTPTransport(
                rate_limiter=self.rate_limiter,
                max_retries=self.max_retries,
                base_delay=self.base_delay,
                max_delay=self.max_delay,
                logger=self.logger,
            )
        return None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create the httpx client on first use."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                transport=self._build_transport(),
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
            )
        return self.client

    def _request_kwargs(self, request: HTTPRequest, **kwargs) -> Dict[str, Any]:
        # Request headers take precedence over client headers
        merged_headers = {**self.headers, **request.headers}
        request_kwargs: Dict[str, Any] = {
            "params": request.query_params,
            "headers": merged_headers,
            **kwargs
        }

        if isinstance(request.body, dict):
            content_type = merged_headers.get("Content-Type", "").lower()
            if "application/x-www-form-urlencoded" in content_type:
                request_kwargs["data"] = request.body
            else:
                request_kwargs["json"] = request.body
        elif isinstance(request.body, (bytes, str)):
            request_kwargs["content"] = request.body
        return request_kwargs

    async def _send(self, client: httpx.AsyncClient, method: str, url: str, request_kwargs: Dict[str, Any]) -> HTTPResponse:
        async with client.stream(method, url, **request_kwargs) as response:
            await response.aread()
        return HTTPResponse(response)

    async def execute(
        self,
        request: HTTPRequest,
        cancel_event: Optional[asyncio.Event] = None,
        **kwargs
    ) -> HTTPResponse:
        """Execute an HTTP request
        Args:
            request: The HTTP request to execute
            cancel_event: Cancellation scope for this call. Setting it aborts the
                request and raises RequestCancelledError.
            kwargs: Additional keyword arguments to pass to httpx
        Returns:
            A HTTPResponse object containing the response from the server
        Raises:
            RequestCancelledError: cancel_event was set before the response arrived
            RemoteRequestFailedError: the transport failed without a response
        """
        method = request.method.upper()
        url = request.resolved_url()

        if cancel_event is not None and cancel_event.is_set():
            self.logger.info("Cancelled before dispatch: %s %s", method, url)
            raise RequestCancelledError(method=method, url=url)

        client = await self._ensure_client()
        request_kwargs = self._request_kwargs(request, **kwargs)
        self.logger.debug("HTTP %s %s params=%s", method, url, request.query_params)

        try:
            if cancel_event is None:
                return await self._send(client, method, url, request_kwargs)
            return await self._send_cancellable(client, method, url, request_kwargs, cancel_event)
        except httpx.HTTPError as e:
            self.logger.error("Transport failure on %s %s: %s", method, url, e)
            raise RemoteRequestFailedError(
                f"{method} {url} failed: {e}", method=method, url=url,
            ) from e

    async def _send_cancellable(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        request_kwargs: Dict[str, Any],
        cancel_event: asyncio.Event,
    ) -> HTTPResponse:
        send = asyncio.ensure_future(self._send(client, method, url, request_kwargs))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({send, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not send.done():
                send.cancel()
                # Let the stream context close before leaving the scope
                await asyncio.gather(send, return_exceptions=True)

        if send.cancelled():
            self.logger.info("Cancelled in flight: %s %s", method, url)
            raise RequestCancelledError(method=method, url=url)
        return send.result()

    async def close(self) -> None:
        """Close the client"""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def __aenter__(self) -> "HTTPClient":
        """Async context manager entry"""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit"""
        await self.close()
