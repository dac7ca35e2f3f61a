# ruff: noqa
import asyncio
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).resolve().parents[4] / ".env"
load_dotenv(env_path)

from zoom_webinars.config.settings import get_settings
from zoom_webinars.exceptions.webinar_exceptions import ZoomWebinarsError
from zoom_webinars.sources.client.zoom.zoom import ZoomClient
from zoom_webinars.sources.external.zoom.models import RecurrenceInfo, RecurrenceType, WebinarSettings
from zoom_webinars.sources.external.zoom.webinars import ZoomWebinarsDataSource
from zoom_webinars.utils.logger import create_logger


async def main() -> None:
    settings = get_settings()
    logger = create_logger("zoom-webinars-example", settings.log_level)
    user_id = os.getenv("ZOOM_USER_ID", "me")

    async with ZoomClient.build_from_settings(settings) as zoom_client:
        webinars = ZoomWebinarsDataSource(zoom_client)

        # ------------------------------------------------------------------
        # Listing
        # ------------------------------------------------------------------
        page = await webinars.get_all(user_id, records_per_page=10)
        logger.info(
            "Page %d/%d: %d of %d webinars",
            page.page_number, page.total_pages, len(page.items), page.total_records,
        )
        for webinar in page.items:
            logger.info("  %s  %s  %s", webinar.id, webinar.start_time, webinar.topic)

        # ------------------------------------------------------------------
        # Creating
        # ------------------------------------------------------------------
        if os.getenv("ZOOM_EXAMPLE_CREATE", "false").lower() != "true":
            return

        try:
            scheduled = await webinars.create_scheduled_webinar(
                user_id,
                topic="Quarterly review",
                agenda="Numbers and questions",
                start=datetime.now(timezone.utc) + timedelta(days=7),
                duration=60,
                password="review*1",
                settings=WebinarSettings(host_video=True, approval_type=2),
                tracking_fields={"team": "finance"},
            )
            logger.info("Scheduled webinar %s: %s", scheduled.id, scheduled.join_url)

            series = await webinars.create_recurring_webinar(
                user_id,
                topic="Office hours",
                agenda=None,
                start=None,
                duration=30,
                recurrence=RecurrenceInfo(type=RecurrenceType.WEEKLY, repeat_interval=1, weekly_days="2", end_times=4),
            )
            logger.info("Recurring webinar %s with %d occurrences", series.id, len(series.occurrences))
        except ZoomWebinarsError as e:
            logger.error("Webinar creation failed: %s %s", e.message, e.details)


if __name__ == "__main__":
    asyncio.run(main())
