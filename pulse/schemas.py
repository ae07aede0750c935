"""Records exchanged between the store, the API and the views."""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pulse.models import EmotionType


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class WindowStatus(str, enum.Enum):
    """Where an instant falls relative to an activity's time window."""
    NOT_STARTED = "not_started"
    OPEN = "open"
    ENDED = "ended"


class ActivityRecord(BaseModel):
    """An activity row as the views and the API see it."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str = ""
    access_code: str
    start_time: datetime
    end_time: datetime
    created_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def _ensure_aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    def window_status(self, now: datetime) -> WindowStatus:
        now = as_utc(now)
        if now < self.start_time:
            return WindowStatus.NOT_STARTED
        if now > self.end_time:
            return WindowStatus.ENDED
        return WindowStatus.OPEN


class FeedbackRecord(BaseModel):
    """A feedback row as the views and the API see it."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    activity_id: uuid.UUID
    emotion_type: EmotionType
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        return as_utc(value)


# --- Request Schemas ---

class CreateActivityRequest(BaseModel):
    """Request to create a new activity. The access code is generated server-side."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def _normalize_times(self) -> "CreateActivityRequest":
        # end > start is not enforced
        self.start_time = as_utc(self.start_time)
        self.end_time = as_utc(self.end_time)
        return self


class JoinActivityRequest(BaseModel):
    """Request to resolve an access code to an open activity."""
    access_code: str = Field(..., min_length=1, max_length=10)


class SubmitFeedbackRequest(BaseModel):
    """Request to record one emotion for an activity."""
    emotion_type: EmotionType
