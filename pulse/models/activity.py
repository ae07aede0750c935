"""Activity model: a professor-defined timed session."""

import secrets
import string
from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from pulse.config import ACCESS_CODE_LENGTH
from pulse.models.base import Base


ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_access_code(length: int = ACCESS_CODE_LENGTH) -> str:
    """Generate a random access code drawn uniformly from [A-Z0-9]."""
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(length))


class Activity(Base):
    """A timed session students join with an access code."""
    
    __tablename__ = "activities"
    
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    
    # Not unique: two activities may share a code
    access_code: Mapped[str] = mapped_column(
        String(10),
        index=True,
        default=generate_access_code,
    )
    
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
        
    def __repr__(self) -> str:
        return f"<Activity {self.access_code} '{self.title}'>"
