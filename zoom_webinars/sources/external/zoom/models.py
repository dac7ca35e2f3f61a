"""
Zoom webinar models.

Only the fields this client reads or writes are declared. Everything else
the API returns is kept as extra data, so the models pass through untouched.
"""

from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field  # type: ignore


class WebinarType(IntEnum):
    """Webinar variant, sent to the API as its integer tag"""

    SCHEDULED_FIXED_TIME = 5
    RECURRING_NO_FIXED_TIME = 6
    RECURRING_FIXED_TIME = 9

    @classmethod
    def for_recurring(cls, start: Optional[datetime]) -> "WebinarType":
        """A recurring series has a fixed time only when a start is given."""
        return cls.RECURRING_FIXED_TIME if start is not None else cls.RECURRING_NO_FIXED_TIME

    def encode(self) -> int:
        return int(self.value)


class RecurrenceType(IntEnum):
    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3


class ZoomModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TrackingField(ZoomModel):
    field: str
    value: Optional[str] = None


class WebinarSettings(ZoomModel):
    """Webinar settings. Unlisted settings are accepted as extra fields."""

    host_video: Optional[bool] = None
    panelists_video: Optional[bool] = None
    practice_session: Optional[bool] = None
    hd_video: Optional[bool] = None
    approval_type: Optional[int] = None
    registration_type: Optional[int] = None
    audio: Optional[str] = None
    auto_recording: Optional[str] = None
    enforce_login: Optional[bool] = None
    alternative_hosts: Optional[str] = None
    close_registration: Optional[bool] = None
    show_share_button: Optional[bool] = None
    allow_multiple_devices: Optional[bool] = None
    on_demand: Optional[bool] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None


class RecurrenceInfo(ZoomModel):
    type: RecurrenceType
    repeat_interval: Optional[int] = None
    weekly_days: Optional[str] = None
    monthly_day: Optional[int] = None
    monthly_week: Optional[int] = None
    monthly_week_day: Optional[int] = None
    end_times: Optional[int] = None
    end_date_time: Optional[datetime] = None


class WebinarOccurrence(ZoomModel):
    occurrence_id: str
    start_time: Optional[datetime] = None
    duration: Optional[int] = None
    status: Optional[str] = None


class Webinar(ZoomModel):
    id: int
    uuid: Optional[str] = None
    host_id: Optional[str] = None
    topic: Optional[str] = None
    agenda: Optional[str] = None
    type: Optional[int] = None
    start_time: Optional[datetime] = None
    duration: Optional[int] = None
    timezone: Optional[str] = None
    password: Optional[str] = None
    created_at: Optional[datetime] = None
    join_url: Optional[str] = None
    start_url: Optional[str] = None
    settings: Optional[WebinarSettings] = None
    tracking_fields: List[TrackingField] = Field(default_factory=list)


class RecurringWebinar(Webinar):
    recurrence: Optional[RecurrenceInfo] = None
    occurrences: List[WebinarOccurrence] = Field(default_factory=list)
