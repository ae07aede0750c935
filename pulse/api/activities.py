"""Activity and feedback API endpoints."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException, ValidationException
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.models import Activity, generate_access_code
from pulse.schemas import (
    ActivityRecord,
    CreateActivityRequest,
    FeedbackRecord,
    JoinActivityRequest,
    SubmitFeedbackRequest,
    WindowStatus,
)
from pulse.store import ACTIVITIES, FEEDBACK, fetch_rows, insert_row
from pulse.utils.logging import error_log

logger = logging.getLogger("Pulse.activities")


# --- Helper Functions ---

async def get_activity_by_id(session: AsyncSession, activity_id: uuid.UUID) -> Activity:
    activity = await session.get(Activity, activity_id)
    if not activity:
        raise NotFoundException(f"Activity {activity_id} not found")
    return activity


# --- Controller ---

class ActivitiesController(Controller):
    """API endpoints for activities and their feedback."""

    path = "/api/activities"
    tags = ["activities"]

    @post("/")
    async def create_activity(
        self,
        data: CreateActivityRequest,
        session: AsyncSession,
    ) -> ActivityRecord:
        """Create a new activity and return it with its access code."""
        logger.info(f"Creating new activity: '{data.title}'")

        try:
            row = await insert_row(session, ACTIVITIES, {
                "title": data.title,
                "description": data.description,
                "access_code": generate_access_code(),
                "start_time": data.start_time,
                "end_time": data.end_time,
            })
        except Exception as e:
            error_log(
                "Failed to create activity",
                exc=e,
                context={
                    "title": data.title,
                    "start_time": data.start_time.isoformat(),
                    "end_time": data.end_time.isoformat(),
                }
            )
            raise

        activity = ActivityRecord.model_validate(row)
        logger.info(f"Activity created: {activity.access_code} ({activity.id})")
        return activity

    @get("/")
    async def list_activities(self, session: AsyncSession) -> List[ActivityRecord]:
        """All activities, newest first."""
        rows = await fetch_rows(session, ACTIVITIES)
        return [ActivityRecord.model_validate(row) for row in rows]

    @post("/join", status_code=HTTP_200_OK)
    async def join_activity(
        self,
        data: JoinActivityRequest,
        session: AsyncSession,
    ) -> ActivityRecord:
        """Resolve an access code to an activity that is currently open."""
        code = data.access_code.strip().upper()
        rows = await fetch_rows(session, ACTIVITIES, {"access_code": code})
        if len(rows) != 1:
            logger.info(f"Join rejected for code {code}: {len(rows)} matches")
            raise NotFoundException("Invalid access code")

        activity = ActivityRecord.model_validate(rows[0])
        status = activity.window_status(datetime.now(timezone.utc))
        if status is WindowStatus.NOT_STARTED:
            raise ValidationException("This activity has not started yet")
        if status is WindowStatus.ENDED:
            raise ValidationException("This activity has ended")

        return activity

    @get("/{activity_id:uuid}/feedback")
    async def list_feedback(
        self,
        activity_id: uuid.UUID,
        session: AsyncSession,
    ) -> List[FeedbackRecord]:
        """Feedback for one activity, newest first."""
        await get_activity_by_id(session, activity_id)
        rows = await fetch_rows(session, FEEDBACK, {"activity_id": activity_id})
        return [FeedbackRecord.model_validate(row) for row in rows]

    @post("/{activity_id:uuid}/feedback")
    async def submit_feedback(
        self,
        activity_id: uuid.UUID,
        data: SubmitFeedbackRequest,
        session: AsyncSession,
    ) -> FeedbackRecord:
        """Record one emotion and notify realtime subscribers."""
        await get_activity_by_id(session, activity_id)

        row = await insert_row(session, FEEDBACK, {
            "activity_id": activity_id,
            "emotion_type": data.emotion_type,
        })
        logger.debug(f"Feedback {data.emotion_type.value} recorded for activity {activity_id}")
        return FeedbackRecord.model_validate(row)
