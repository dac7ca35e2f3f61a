"""
Global pytest configuration and fixtures for the webinar client tests.

Shared fixtures here are available to all test modules without explicit import.
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator, Dict, Generator

import pytest  # type: ignore
import pytest_asyncio  # type: ignore
from faker import Faker  # type: ignore

# Add the project root to Python path
project_root: Path = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.zoom_api import BASE_URL, FakeZoomAPI  # noqa: E402
from zoom_webinars.config.settings import reset_settings  # noqa: E402
from zoom_webinars.sources.client.zoom.zoom import ZoomClient, ZoomTokenConfig  # noqa: E402
from zoom_webinars.sources.external.zoom.webinars import ZoomWebinarsDataSource  # noqa: E402

fake: Faker = Faker()


# ============================================================================
# Session-level fixtures
# ============================================================================


@pytest.fixture(scope="session")
def faker_instance() -> Faker:
    """Provide a Faker instance for generating test data."""
    return fake


# ============================================================================
# Function-level fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """
    Reset environment and settings singleton around each test.
    This ensures tests don't interfere with each other.
    """
    original_env: Dict[str, str] = os.environ.copy()
    reset_settings()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    reset_settings()


@pytest.fixture
def zoom_api() -> FakeZoomAPI:
    """Empty fake Zoom API. Tests seed `zoom_api.webinars` as needed."""
    return FakeZoomAPI()


@pytest_asyncio.fixture
async def zoom_client(zoom_api: FakeZoomAPI) -> AsyncGenerator[ZoomClient, None]:
    """Token-authenticated ZoomClient talking to the fake API."""
    client = ZoomClient.build_with_config(
        ZoomTokenConfig(token="test-token", base_url=BASE_URL, transport=zoom_api.transport())
    )
    yield client
    await client.close()


@pytest.fixture
def webinars(zoom_client: ZoomClient) -> ZoomWebinarsDataSource:
    return ZoomWebinarsDataSource(zoom_client)
