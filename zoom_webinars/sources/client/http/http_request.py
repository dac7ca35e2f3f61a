from typing import Any, Dict, Union

from pydantic import BaseModel, Field  # type: ignore


class HTTPRequest(BaseModel):
    """HTTP request
    Args:
        url: The URL of the request, may contain {placeholders} filled from path_params
        method: The HTTP method to use
        headers: The headers to send with the request
        body: The body of the request (dict is sent as JSON unless form encoded)
        path_params: The path parameters to use
        query_params: The query parameters to use
    """
    url: str
    method: str = Field(default="GET")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Union[Dict[str, Any], bytes, str, None] = None
    path_params: Dict[str, str] = Field(default_factory=dict)
    query_params: Dict[str, str] = Field(default_factory=dict)

    def resolved_url(self) -> str:
        """The url with path_params filled in. path_params must already be escaped."""
        return self.url.format(**self.path_params)

    def describe(self) -> str:
        """Short `METHOD url` form used in log lines and errors."""
        return f"{self.method.upper()} {self.resolved_url()}"
