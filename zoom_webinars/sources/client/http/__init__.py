"""Async HTTP transport used by the Zoom clients."""

from zoom_webinars.sources.client.http.http_client import HTTPClient
from zoom_webinars.sources.client.http.http_request import HTTPRequest
from zoom_webinars.sources.client.http.http_response import HTTPResponse
from zoom_webinars.sources.client.http.resilient_transport import ResilientHTTPTransport

__all__ = [
    "HTTPClient",
    "HTTPRequest",
    "HTTPResponse",
    "ResilientHTTPTransport",
]
