"""
Page-number pagination for Zoom listing endpoints.

fetch_page issues exactly one request and returns exactly the page asked
for. iterate_pages is the caller-side loop for walking every page.
"""

import asyncio
import logging
import math
from typing import AsyncIterator, Awaitable, Callable, Dict, Generic, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator  # type: ignore

from zoom_webinars.config.constants.http_status_code import HttpStatusCode
from zoom_webinars.config.constants.zoom import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_PAGE_SIZE
from zoom_webinars.exceptions.webinar_exceptions import (
    DecodingFailedError,
    InvalidArgumentError,
    RemoteRequestFailedError,
)
from zoom_webinars.sources.client.http.http_client import HTTPClient
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.http.http_response import HTTPResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PaginationRequest(BaseModel):
    """Page size and page number of a listing call.

    Raises:
        InvalidArgumentError: page_size outside [1, 300] or page_number below 1
    """

    model_config = ConfigDict(frozen=True)

    page_size: int = DEFAULT_PAGE_SIZE
    page_number: int = 1

    def __init__(self, **data) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            error = e.errors()[0]
            argument = str(error["loc"][0]) if error.get("loc") else None
            raise InvalidArgumentError(error["msg"], argument=argument, value=error.get("input")) from e

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < MIN_PAGE_SIZE or v > MAX_PAGE_SIZE:
            raise ValueError(f"Records per page must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")
        return v

    @field_validator("page_number")
    @classmethod
    def validate_page_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page number must be 1 or greater")
        return v

    def next(self) -> "PaginationRequest":
        return PaginationRequest(page_size=self.page_size, page_number=self.page_number + 1)

    def to_query(self) -> dict:
        return {"page_size": str(self.page_size), "page": str(self.page_number)}


class Page(BaseModel, Generic[T]):
    """One page of a listing, exactly as the API returned it."""

    model_config = ConfigDict(frozen=True)

    items: Tuple[T, ...] = ()
    page_number: int
    page_size: int
    total_records: int
    total_pages: int

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages


class PageEnvelope(BaseModel):
    """Pagination metadata shared by Zoom listing responses."""

    page_count: Optional[int] = None
    page_number: Optional[int] = None
    page_size: Optional[int] = None
    total_records: int = 0


def ensure_success(response: HTTPResponse, request: HTTPRequest) -> None:
    """Raise RemoteRequestFailedError for any non-2xx response."""
    if HttpStatusCode.is_success(response.status):
        return
    body = response.text()
    logger.error("%s returned HTTP %d: %s", request.describe(), response.status, body)
    raise RemoteRequestFailedError(
        f"{request.describe()} returned HTTP {response.status}",
        status_code=response.status,
        body=body,
        method=request.method,
        url=request.resolved_url(),
    )


def decode_json(response: HTTPResponse) -> dict:
    try:
        data = response.json()
    except ValueError as e:
        raise DecodingFailedError(f"Response is not valid JSON: {e}", body=response.text()) from e
    if not isinstance(data, dict):
        raise DecodingFailedError(f"Expected a JSON object, got {type(data).__name__}", body=response.text())
    return data


def decode_page(data: dict, pagination: PaginationRequest, item_model: Type[T], records_key: str) -> Page[T]:
    """Build a Page from a decoded listing envelope."""
    if records_key not in data:
        raise DecodingFailedError(f"Listing key '{records_key}' is missing")
    if not isinstance(data[records_key], list):
        raise DecodingFailedError(f"'{records_key}' is not a list")
    try:
        envelope = PageEnvelope.model_validate(data)
        items = [item_model.model_validate(item) for item in data[records_key]]
    except ValidationError as e:
        raise DecodingFailedError(f"Unexpected listing shape: {e}") from e

    page_size = envelope.page_size or pagination.page_size
    total_pages = envelope.page_count
    if total_pages is None:
        total_pages = math.ceil(envelope.total_records / page_size) if page_size else 0

    return Page[item_model](
        items=items,
        page_number=envelope.page_number or pagination.page_number,
        page_size=page_size,
        total_records=envelope.total_records,
        total_pages=total_pages,
    )


async def fetch_page(
    client: HTTPClient,
    url: str,
    pagination: PaginationRequest,
    item_model: Type[T],
    records_key: str,
    path_params: Optional[Dict[str, str]] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> Page[T]:
    """
    Fetch a single page of a listing.

    Args:
        client: Transport used to send the request
        url: Absolute listing URL, may contain {placeholders}
        pagination: Validated page size and page number
        item_model: Model each listed record is decoded into
        records_key: Envelope key holding the records, e.g. "webinars"
        path_params: Already-escaped values for the URL placeholders
        cancel_event: Cancellation scope of the call

    Returns:
        The requested page. Following pages are not fetched.
    """
    request = HTTPRequest(
        method="GET", url=url, path_params=path_params or {}, query_params=pagination.to_query(),
    )
    response = await client.execute(request, cancel_event=cancel_event)
    ensure_success(response, request)

    try:
        page = decode_page(decode_json(response), pagination, item_model, records_key)
    except DecodingFailedError as e:
        logger.error("Could not decode %s: %s", request.describe(), e.message)
        raise
    logger.debug(
        "Fetched page %d/%d of %s (%d items)",
        page.page_number, page.total_pages, request.resolved_url(), len(page.items),
    )
    return page


async def iterate_pages(
    fetch: Callable[[PaginationRequest], Awaitable[Page[T]]],
    first: PaginationRequest,
) -> AsyncIterator[Page[T]]:
    """Yield pages starting at `first` until the last page has been fetched."""
    pagination = first
    while True:
        page = await fetch(pagination)
        yield page
        if not page.has_next_page or not page.items:
            return
        pagination = pagination.next()
