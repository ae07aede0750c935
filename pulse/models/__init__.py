"""Pulse database models."""

from pulse.models.base import Base
from pulse.models.activity import Activity, generate_access_code, ACCESS_CODE_ALPHABET
from pulse.models.feedback import FeedbackEvent, EmotionType

__all__ = [
    "Base",
    "Activity",
    "generate_access_code",
    "ACCESS_CODE_ALPHABET",
    "FeedbackEvent",
    "EmotionType",
]
