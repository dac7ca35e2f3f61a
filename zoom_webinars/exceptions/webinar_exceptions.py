from typing import Any, Optional


class ZoomWebinarsError(Exception):
    """Base exception for webinar client errors"""

    def __init__(self, message: str, details: dict = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidArgumentError(ZoomWebinarsError, ValueError):
    """Raised when a call argument fails a local precondition.

    Always raised before any request is sent.
    """

    def __init__(self, message: str, argument: str = None, value: Any = None) -> None:
        super().__init__(message, {"argument": argument, "value": value})
        self.argument = argument
        self.value = value


class RemoteRequestFailedError(ZoomWebinarsError):
    """Raised when the API answers with a non-2xx status or the transport fails.

    ``status_code`` is None when no response was received at all.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            {"status_code": status_code, "body": body, "method": method, "url": url},
        )
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url


class DecodingFailedError(ZoomWebinarsError):
    """Raised when a response body doesn't match the expected shape"""

    def __init__(self, message: str, body: Optional[str] = None) -> None:
        super().__init__(message, {"body": body})
        self.body = body


class RequestCancelledError(ZoomWebinarsError):
    """Raised when a call's cancel event fires before the response arrives"""

    def __init__(self, message: str = "Request was cancelled", method: str = None, url: str = None) -> None:
        super().__init__(message, {"method": method, "url": url})
        self.method = method
        self.url = url
