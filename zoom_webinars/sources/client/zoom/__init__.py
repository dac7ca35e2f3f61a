"""Zoom client module."""
from zoom_webinars.sources.client.zoom.zoom import (
    ZoomClient,
    ZoomRESTClientViaServerToServer,
    ZoomRESTClientViaToken,
    ZoomServerToServerConfig,
    ZoomTokenConfig,
)

__all__ = [
    "ZoomClient",
    "ZoomRESTClientViaServerToServer",
    "ZoomRESTClientViaToken",
    "ZoomServerToServerConfig",
    "ZoomTokenConfig",
]
