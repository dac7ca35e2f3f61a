from typing import Any

import httpx  # type: ignore


class HTTPResponse:
    """Read-only view over a fully received httpx response.

    The body has already been read when this object is created, so none of
    the accessors perform I/O.
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status_code

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def is_success(self) -> bool:
        return self.response.is_success

    def json(self) -> Any:
        return self.response.json()

    def text(self) -> str:
        return self.response.text

    def bytes(self) -> bytes:
        return self.response.content

    def __repr__(self) -> str:
        return f"<HTTPResponse [{self.status}]>"
