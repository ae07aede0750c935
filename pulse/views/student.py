"""Student view: join an activity by access code and send reactions."""

import enum
import logging
from typing import Optional, Union

from pulse.models import EmotionType
from pulse.schemas import ActivityRecord, FeedbackRecord, WindowStatus
from pulse.store import ACTIVITIES, FEEDBACK, StoreError
from pulse.views.base import BaseView

logger = logging.getLogger("Pulse.views.student")


class JoinOutcome(str, enum.Enum):
    JOINED = "joined"
    INVALID_CODE = "invalid_code"
    NOT_STARTED = "not_started"
    ENDED = "ended"


JOIN_MESSAGES = {
    JoinOutcome.JOINED: "Joined activity successfully",
    JoinOutcome.INVALID_CODE: "Invalid access code",
    JoinOutcome.NOT_STARTED: "This activity has not started yet",
    JoinOutcome.ENDED: "This activity has ended",
}


class StudentView(BaseView):
    """Resolves an access code, then submits and watches feedback."""

    current_activity: Optional[ActivityRecord] = None

    async def join_activity(self, code: str) -> JoinOutcome:
        """
        Look up exactly one activity by access code and join it if it is open.

        The code is matched case-insensitively. Zero or several matches count
        as an invalid code. Joining while already in an activity switches to
        the new one.
        """
        try:
            row = await self.service.select_single(ACTIVITIES, {"access_code": code.strip().upper()})
        except StoreError as e:
            logger.info(f"Access code {code!r} rejected: {e}")
            return self._finish_join(JoinOutcome.INVALID_CODE)

        activity = ActivityRecord.model_validate(row)
        status = activity.window_status(self.clock())
        if status is WindowStatus.NOT_STARTED:
            return self._finish_join(JoinOutcome.NOT_STARTED)
        if status is WindowStatus.ENDED:
            return self._finish_join(JoinOutcome.ENDED)

        self.current_activity = activity
        await self._open_feed(activity.id)
        logger.info(f"Joined activity {activity.access_code} ({activity.id})")
        return self._finish_join(JoinOutcome.JOINED)

    def _finish_join(self, outcome: JoinOutcome) -> JoinOutcome:
        if outcome is JoinOutcome.JOINED:
            self.notify_success(JOIN_MESSAGES[outcome])
        else:
            self.notify_error(JOIN_MESSAGES[outcome])
        return outcome

    async def submit_feedback(self, emotion: Union[EmotionType, str]) -> Optional[FeedbackRecord]:
        """Append one reaction to the current activity. No-op when not joined."""
        if self.current_activity is None:
            return None

        emotion = EmotionType(emotion)
        try:
            row = await self.service.insert(FEEDBACK, {
                "activity_id": str(self.current_activity.id),
                "emotion_type": emotion.value,
            })
        except StoreError as e:
            logger.warning(f"Error submitting feedback to {self.current_activity.id}: {e}")
            self.notify_error("Error submitting feedback")
            return None

        self.notify_success("Feedback submitted")
        return FeedbackRecord.model_validate(row)
