"""
Resilient HTTP transport.
Combines optional rate limiting and retry logic at the transport layer.
"""

import asyncio
import logging
import random
from http import HTTPStatus
from typing import FrozenSet, Optional, Union

import httpx  # type: ignore
from aiolimiter import AsyncLimiter

# POST is excluded: retrying a create could schedule the same webinar twice.
IDEMPOTENT_METHODS: FrozenSet[str] = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

NETWORK_ERRORS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
)


class ResilientHTTPTransport(httpx.AsyncHTTPTransport):
    """
    HTTP transport with optional rate limiting and retry logic.

    - Rate limits ONCE per logical request (not per retry attempt)
    - Retries idempotent requests on 429, 5xx and network errors
    - Respects a numeric Retry-After header
    - Otherwise backs off exponentially with full jitter
    """

    def __init__(
        self,
        rate_limiter: Optional[AsyncLimiter] = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 32.0,
        retry_methods: FrozenSet[str] = IDEMPOTENT_METHODS,
        logger: Optional[logging.Logger] = None,
        **kwargs
    ) -> None:
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError(f"max_retries must be a non-negative integer, got: {max_retries}")
        if not isinstance(base_delay, (int, float)) or base_delay < 0:
            raise ValueError(f"base_delay must be a non-negative number, got: {base_delay}")
        if not isinstance(max_delay, (int, float)) or max_delay < base_delay:
            raise ValueError(f"max_delay ({max_delay}) must be >= base_delay ({base_delay})")

        super().__init__(**kwargs)
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.retry_methods = frozenset(m.upper() for m in retry_methods)
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def is_retryable_status(status_code: int) -> bool:
        return (
            status_code == HTTPStatus.TOO_MANY_REQUESTS
            or HTTPStatus.INTERNAL_SERVER_ERROR <= status_code <= HTTPStatus.NETWORK_AUTHENTICATION_REQUIRED
        )

    def _can_retry(self, request: httpx.Request, attempt: int) -> bool:
        return attempt < self.max_retries and request.method.upper() in self.retry_methods

    def calculate_delay(self, response: Union[httpx.Response, None], attempt: int) -> float:
        """
        Delay before the next attempt.

        A numeric Retry-After header wins; a date-valued one falls back to
        exponential backoff with full jitter.
        """
        if response is not None:
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass

        exponential = min(self.max_delay, self.base_delay * (2 ** attempt))
        return random.uniform(0, exponential)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self.rate_limiter:
            await self.rate_limiter.acquire()

        attempt = 0
        while True:
            try:
                response = await super().handle_async_request(request)
            except NETWORK_ERRORS as e:
                if not self._can_retry(request, attempt):
                    self.logger.error(
                        "%s %s failed after %d attempt(s): %s",
                        request.method, request.url, attempt + 1, type(e).__name__,
                    )
                    raise
                delay = self.calculate_delay(None, attempt)
                self.logger.warning(
                    "Network error %s on %s %s (attempt %d/%d), retrying in %.2fs",
                    type(e).__name__, request.method, request.url, attempt + 1, self.max_retries + 1, delay,
                )
            else:
                if not self.is_retryable_status(response.status_code) or not self._can_retry(request, attempt):
                    return response
                delay = self.calculate_delay(response, attempt)
                # Release the connection before the next attempt
                await response.aclose()
                self.logger.warning(
                    "HTTP %d on %s %s (attempt %d/%d), retrying in %.2fs",
                    response.status_code, request.method, request.url, attempt + 1, self.max_retries + 1, delay,
                )

            await asyncio.sleep(delay)
            attempt += 1
