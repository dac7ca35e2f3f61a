"""Async client for the Zoom webinars API."""

from zoom_webinars.exceptions.webinar_exceptions import (
    DecodingFailedError,
    InvalidArgumentError,
    RemoteRequestFailedError,
    RequestCancelledError,
    ZoomWebinarsError,
)
from zoom_webinars.sources.client.zoom.zoom import (
    ZoomClient,
    ZoomServerToServerConfig,
    ZoomTokenConfig,
)
from zoom_webinars.sources.external.zoom.models import (
    RecurrenceInfo,
    RecurrenceType,
    RecurringWebinar,
    Webinar,
    WebinarSettings,
    WebinarType,
)
from zoom_webinars.sources.external.zoom.pagination import Page, PaginationRequest
from zoom_webinars.sources.external.zoom.webinars import ZoomWebinarsDataSource

__version__ = "0.1.0"

__all__ = [
    "DecodingFailedError",
    "InvalidArgumentError",
    "Page",
    "PaginationRequest",
    "RecurrenceInfo",
    "RecurrenceType",
    "RecurringWebinar",
    "RemoteRequestFailedError",
    "RequestCancelledError",
    "Webinar",
    "WebinarSettings",
    "WebinarType",
    "ZoomClient",
    "ZoomServerToServerConfig",
    "ZoomTokenConfig",
    "ZoomWebinarsDataSource",
    "ZoomWebinarsError",
]
