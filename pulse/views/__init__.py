"""Professor and student view controllers."""

from pulse.views.base import Notice, NoticeKind
from pulse.views.feed import FeedbackFeed, FeedState
from pulse.views.professor import ActivityDraft, ProfessorView, is_active, status_label
from pulse.views.student import JoinOutcome, StudentView
from pulse.views.toasts import Toast, ToastTray

__all__ = [
    "Notice",
    "NoticeKind",
    "FeedbackFeed",
    "FeedState",
    "ActivityDraft",
    "ProfessorView",
    "is_active",
    "status_label",
    "JoinOutcome",
    "StudentView",
    "Toast",
    "ToastTray",
]
