import asyncio
import logging
import re
from datetime import datetime
from typing import AsyncIterator, Dict, Mapping, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError  # type: ignore

from zoom_webinars.config.constants.zoom import DEFAULT_PAGE_SIZE, PASSWORD_MAX_LENGTH
from zoom_webinars.exceptions.webinar_exceptions import DecodingFailedError, InvalidArgumentError
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.zoom.zoom import ZoomClient
from zoom_webinars.sources.external.zoom.models import (
    RecurrenceInfo,
    RecurringWebinar,
    Webinar,
    WebinarSettings,
    WebinarType,
)
from zoom_webinars.sources.external.zoom.pagination import (
    Page,
    PaginationRequest,
    decode_json,
    ensure_success,
    fetch_page,
    iterate_pages,
)
from zoom_webinars.sources.external.zoom.payload import (
    FieldSpec,
    Payload,
    build_payload,
    encode_model,
    encode_timestamp,
    encode_tracking_fields,
    to_json_body,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

PASSWORD_PATTERN = re.compile(r"^[a-zA-Z0-9@\-_*]{1,%d}$" % PASSWORD_MAX_LENGTH)


def validate_password(password: Optional[str]) -> Optional[str]:
    """Webinar passwords may only use [a-z A-Z 0-9 @ - _ *], 10 characters at most."""
    if password is not None and not PASSWORD_PATTERN.fullmatch(password):
        raise InvalidArgumentError(
            f"Password may only contain [a-z A-Z 0-9 @ - _ *] and be at most {PASSWORD_MAX_LENGTH} characters",
            argument="password",
        )
    return password


def scheduled_webinar_payload(
    topic: Optional[str],
    agenda: Optional[str],
    start: datetime,
    duration: int,
    password: Optional[str] = None,
    settings: Optional[WebinarSettings] = None,
    tracking_fields: Optional[Mapping[str, str]] = None,
) -> Payload:
    return build_payload([
        FieldSpec("type", WebinarType.SCHEDULED_FIXED_TIME, WebinarType.encode),
        FieldSpec("topic", topic),
        FieldSpec("agenda", agenda),
        FieldSpec("password", password),
        FieldSpec("start_time", start, encode_timestamp),
        FieldSpec("duration", duration),
        FieldSpec("timezone", "UTC"),
        FieldSpec("settings", settings, encode_model),
        FieldSpec("tracking_fields", tracking_fields, encode_tracking_fields),
    ])


def recurring_webinar_payload(
    topic: Optional[str],
    agenda: Optional[str],
    start: Optional[datetime],
    duration: int,
    recurrence: Optional[RecurrenceInfo],
    password: Optional[str] = None,
    settings: Optional[WebinarSettings] = None,
    tracking_fields: Optional[Mapping[str, str]] = None,
) -> Payload:
    return build_payload([
        FieldSpec("type", WebinarType.for_recurring(start), WebinarType.encode),
        FieldSpec("topic", topic),
        FieldSpec("agenda", agenda),
        FieldSpec("password", password),
        FieldSpec("start_time", start, encode_timestamp),
        FieldSpec("duration", duration),
        FieldSpec("recurrence", recurrence, encode_model),
        FieldSpec("timezone", "UTC"),
        FieldSpec("settings", settings, encode_model),
        FieldSpec("tracking_fields", tracking_fields, encode_tracking_fields),
    ])


class ZoomWebinarsDataSource:
    """Zoom webinars API.
    - Uses the HTTP client wrapped by `ZoomClient`
    - Listing returns one typed `Page` per call
    - Create calls return the created webinar model

    Every method takes an optional `cancel_event`; setting it aborts the
    request and raises RequestCancelledError.
    """

    def __init__(self, client: ZoomClient) -> None:
        """Initialize with ZoomClient."""
        self._client = client.get_client()
        if self._client is None:
            raise ValueError("HTTP client is not initialized")
        try:
            self.base_url = self._client.get_base_url().rstrip("/")
        except AttributeError as exc:
            raise ValueError("HTTP client does not have get_base_url method") from exc

    def _webinars_url(self) -> str:
        # Braces in the base URL are escaped; the template is formatted once, in HTTPClient.execute
        return self.base_url.replace("{", "{{").replace("}", "}}") + "/users/{userId}/webinars"

    async def get_all(
        self,
        user_id: str,
        records_per_page: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Page[Webinar]:
        """Retrieve one page of a user's webinars
        HTTP GET /users/{userId}/webinars

        Args:
            user_id: The user ID or email address
            records_per_page: Number of records returned per page (1-300)
            page: Page number of results
            cancel_event: Cancellation scope of the call

        Returns:
            Page[Webinar]

        Raises:
            InvalidArgumentError: records_per_page outside [1, 300], raised before any request
        """
        pagination = PaginationRequest(page_size=records_per_page, page_number=page)
        return await fetch_page(
            self._client,
            self._webinars_url(),
            pagination,
            Webinar,
            "webinars",
            path_params=_user_path_params(user_id),
            cancel_event=cancel_event,
        )

    async def iter_all(
        self,
        user_id: str,
        records_per_page: int = DEFAULT_PAGE_SIZE,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[Webinar]:
        """Iterate over every webinar of a user, one page request at a time."""
        first = PaginationRequest(page_size=records_per_page, page_number=1)

        async def fetch(pagination: PaginationRequest) -> Page[Webinar]:
            return await self.get_all(user_id, pagination.page_size, pagination.page_number, cancel_event)

        async for result_page in iterate_pages(fetch, first):
            for webinar in result_page.items:
                yield webinar

    async def create_scheduled_webinar(
        self,
        user_id: str,
        topic: Optional[str],
        agenda: Optional[str],
        start: datetime,
        duration: int,
        password: Optional[str] = None,
        settings: Optional[WebinarSettings] = None,
        tracking_fields: Optional[Mapping[str, str]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Webinar:
        """Create a scheduled webinar
        HTTP POST /users/{userId}/webinars

        Args:
            user_id: The user ID or email address
            topic: Webinar topic
            agenda: Webinar description
            start: Webinar start time, sent in UTC
            duration: Webinar duration in minutes
            password: Password to join, [a-z A-Z 0-9 @ - _ *], 10 characters at most
            settings: Webinar settings
            tracking_fields: Tracking field names mapped to values
            cancel_event: Cancellation scope of the call

        Returns:
            The new webinar
        """
        if start is None:
            raise InvalidArgumentError("A scheduled webinar needs a start time", argument="start")
        validate_password(password)
        payload = scheduled_webinar_payload(topic, agenda, start, duration, password, settings, tracking_fields)
        return await self._create(user_id, payload, Webinar, cancel_event)

    async def create_recurring_webinar(
        self,
        user_id: str,
        topic: Optional[str],
        agenda: Optional[str],
        start: Optional[datetime],
        duration: int,
        recurrence: Optional[RecurrenceInfo],
        password: Optional[str] = None,
        settings: Optional[WebinarSettings] = None,
        tracking_fields: Optional[Mapping[str, str]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RecurringWebinar:
        """Create a recurring webinar
        HTTP POST /users/{userId}/webinars

        The series has a fixed time (type 9) when `start` is given and no
        fixed time (type 6) otherwise.

        Args:
            user_id: The user ID or email address
            topic: Webinar topic
            agenda: Webinar description
            start: Start time of the series, or None for no fixed time
            duration: Webinar duration in minutes
            recurrence: Recurrence information
            password: Password to join, [a-z A-Z 0-9 @ - _ *], 10 characters at most
            settings: Webinar settings
            tracking_fields: Tracking field names mapped to values
            cancel_event: Cancellation scope of the call

        Returns:
            The new recurring webinar
        """
        validate_password(password)
        payload = recurring_webinar_payload(
            topic, agenda, start, duration, recurrence, password, settings, tracking_fields,
        )
        return await self._create(user_id, payload, RecurringWebinar, cancel_event)

    async def _create(
        self,
        user_id: str,
        payload: Payload,
        model: Type[M],
        cancel_event: Optional[asyncio.Event],
    ) -> M:
        request = HTTPRequest(
            method="POST",
            url=self._webinars_url(),
            path_params=_user_path_params(user_id),
            headers={"Content-Type": "application/json"},
            body=to_json_body(payload),
        )
        response = await self._client.execute(request, cancel_event=cancel_event)
        ensure_success(response, request)
        return _decode_entity(response_data=decode_json(response), model=model, request=request)


def _decode_entity(response_data: dict, model: Type[M], request: HTTPRequest) -> M:
    try:
        entity = model.model_validate(response_data)
    except ValidationError as e:
        logger.error("Could not decode %s response as %s: %s", request.describe(), model.__name__, e)
        raise DecodingFailedError(f"Unexpected {model.__name__} shape: {e}") from e
    logger.info("Created %s %s", model.__name__, getattr(entity, "id", None))
    return entity


# ---- Helpers ----
def _user_path_params(user_id: str) -> Dict[str, str]:
    """User IDs may be email addresses; everything but @ is percent-encoded."""
    return {"userId": quote(user_id, safe="@")}
