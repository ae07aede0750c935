"""Feedback event model: one emotion reaction to an activity."""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from pulse.models.base import Base


class EmotionType(str, enum.Enum):
    """The four reactions a student can send."""
    HAPPY = "happy"
    SAD = "sad"
    SURPRISED = "surprised"
    CONFUSED = "confused"


class FeedbackEvent(Base):
    """A single emotion submitted by a student. Append-only."""
    
    __tablename__ = "feedback"
    
    activity_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        index=True,
    )
    # Store enum values ("happy"), matching what realtime payloads carry
    emotion_type: Mapped[EmotionType] = mapped_column(
        Enum(EmotionType, values_callable=lambda e: [m.value for m in e], native_enum=False),
    )
        
    def __repr__(self) -> str:
        return f"<FeedbackEvent {self.emotion_type.value} ({self.created_at})>"
