"""
In-memory stand-in for the Zoom webinars endpoints.

Served through httpx.MockTransport so the real HTTPClient, streaming and
cancellation code paths run unchanged.
"""

import asyncio
import json
import math
from typing import Any, Dict, List, Optional, Tuple

import httpx  # type: ignore

BASE_URL = "https://api.zoom.test/v2"
TOKEN_URL = "https://zoom.test/oauth/token"


def make_webinars(count: int) -> List[Dict[str, Any]]:
    return [
        {"id": 1000 + i, "uuid": f"uuid-{i}", "topic": f"Webinar {i}", "type": 5, "duration": 60}
        for i in range(count)
    ]


class FakeZoomAPI:
    """Records every request and answers like the Zoom webinars API."""

    def __init__(self, webinars: Optional[List[Dict[str, Any]]] = None) -> None:
        self.webinars = webinars if webinars is not None else []
        self.requests: List[httpx.Request] = []
        self.created: List[Dict[str, Any]] = []
        self.token_requests = 0
        self.fail_with: Optional[Tuple[int, str]] = None
        self.raw_response: Optional[httpx.Response] = None
        self.delay: float = 0.0
        self.dispatched = asyncio.Event()

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(BASE_URL)]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.dispatched.set()
        if self.delay:
            await asyncio.sleep(self.delay)

        if str(request.url).startswith(TOKEN_URL):
            self.token_requests += 1
            return httpx.Response(200, json={"access_token": f"s2s-token-{self.token_requests}", "expires_in": 3600})

        if self.fail_with is not None:
            status, body = self.fail_with
            return httpx.Response(status, text=body)
        if self.raw_response is not None:
            return self.raw_response

        if request.url.path.endswith("/webinars"):
            if request.method == "GET":
                return self._list(request)
            if request.method == "POST":
                return self._create(request)
        return httpx.Response(404, json={"code": 404, "message": "Not found"})

    def _list(self, request: httpx.Request) -> httpx.Response:
        page_size = int(request.url.params["page_size"])
        page = int(request.url.params["page"])
        start = (page - 1) * page_size
        return httpx.Response(200, json={
            "page_count": math.ceil(len(self.webinars) / page_size),
            "page_number": page,
            "page_size": page_size,
            "total_records": len(self.webinars),
            "webinars": self.webinars[start:start + page_size],
        })

    def _create(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.created.append(body)
        webinar_id = 90000 + len(self.created)
        created = {
            "id": webinar_id,
            "uuid": f"created-{webinar_id}",
            "join_url": f"https://zoom.test/j/{webinar_id}",
            "created_at": "2024-03-01T10:00:00Z",
            **body,
        }
        if body.get("type") in (6, 9):
            created["occurrences"] = [
                {"occurrence_id": "1710000000000", "start_time": "2024-03-10T15:00:00Z", "duration": body.get("duration")},
            ]
        return httpx.Response(201, json=created)
