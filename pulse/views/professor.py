"""Professor view: create and list activities, watch feedback live."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from pulse.config import TOAST_TTL_MS
from pulse.models import generate_access_code
from pulse.schemas import ActivityRecord, FeedbackRecord, WindowStatus, as_utc
from pulse.store import ACTIVITIES, DataService, StoreError
from pulse.views.base import BaseView, utcnow
from pulse.views.toasts import ToastTray

logger = logging.getLogger("Pulse.views.professor")


def is_active(activity: ActivityRecord, now: datetime) -> bool:
    """True when ``start_time <= now <= end_time``. Display only."""
    return activity.window_status(now) is WindowStatus.OPEN


def status_label(activity: ActivityRecord, now: datetime) -> str:
    return "Active" if is_active(activity, now) else "Ended"


@dataclass
class ActivityDraft:
    """The professor's "new activity" form."""
    title: str = ""
    description: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class ProfessorView(BaseView):
    """Activity management plus a live feedback panel with toast badges."""

    def __init__(
        self,
        service: DataService,
        clock: Callable[[], datetime] = utcnow,
        toast_clock: Optional[Callable[[], float]] = None,
        toast_ttl_ms: float = TOAST_TTL_MS,
        schedule_toasts: bool = True,
    ):
        super().__init__(service, clock)
        self.form = ActivityDraft()
        self.activities: List[ActivityRecord] = []
        self.selected_activity: Optional[ActivityRecord] = None
        self.toasts = ToastTray(ttl_ms=toast_ttl_ms, clock=toast_clock, schedule=schedule_toasts)

    def is_active(self, activity: ActivityRecord) -> bool:
        return is_active(activity, self.clock())

    async def list_activities(self) -> List[ActivityRecord]:
        """Load every activity, newest first."""
        try:
            rows = await self.service.select(ACTIVITIES)
        except StoreError as e:
            logger.warning(f"Error loading activities: {e}")
            self.notify_error("Error loading activities")
            self.activities = []
        else:
            self.activities = [ActivityRecord.model_validate(row) for row in rows]
        return self.activities

    async def create_activity(
        self,
        title: str,
        description: str,
        start_time: datetime,
        end_time: datetime,
    ) -> Optional[ActivityRecord]:
        """
        Persist a new activity with a fresh access code.

        On success the form is cleared and the activity list reloaded. A store
        rejection leaves a notice and nothing else; there is no retry.
        """
        access_code = generate_access_code()
        try:
            row = await self.service.insert(ACTIVITIES, {
                "title": title,
                "description": description,
                "access_code": access_code,
                "start_time": as_utc(start_time).isoformat(),
                "end_time": as_utc(end_time).isoformat(),
            })
        except StoreError as e:
            logger.warning(f"Error creating activity '{title}': {e}")
            self.notify_error("Error creating activity")
            return None

        activity = ActivityRecord.model_validate(row)
        logger.info(f"Activity created: {activity.access_code} ('{activity.title}')")
        self.notify_success("Activity created successfully")
        self.form = ActivityDraft()
        await self.list_activities()
        return activity

    async def submit_form(self) -> Optional[ActivityRecord]:
        """Create an activity from the current form contents."""
        form = self.form
        if not form.title or form.start_time is None or form.end_time is None:
            raise ValueError("title, start_time and end_time are required")
        return await self.create_activity(form.title, form.description, form.start_time, form.end_time)

    async def select_activity(self, activity: ActivityRecord) -> None:
        """Switch the feedback panel to ``activity``, dropping the old feed first."""
        self.selected_activity = activity
        await self._open_feed(activity.id, on_insert=self._on_feedback)

    def _on_feedback(self, record: FeedbackRecord) -> None:
        self.toasts.push(record.emotion_type)

    async def close(self) -> None:
        await super().close()
        self.toasts.close()
