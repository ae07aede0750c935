from datetime import timedelta

import pytest

from pulse.models import EmotionType
from pulse.store import ACTIVITIES, FEEDBACK
from pulse.views import FeedState, JoinOutcome, NoticeKind, StudentView


@pytest.fixture()
def activity_row(service, clock):
    return service.add(
        ACTIVITIES,
        title="Databases",
        description="Normal forms",
        access_code="QW3RTY",
        start_time=clock.now,
        end_time=clock.now + timedelta(hours=1),
    )


@pytest.mark.asyncio
async def test_join_before_start_is_rejected(service, clock, activity_row):
    clock.advance(minutes=-5)
    view = StudentView(service, clock=clock)

    assert await view.join_activity("QW3RTY") is JoinOutcome.NOT_STARTED
    assert view.current_activity is None
    assert view.feed is None
    assert view.notices[-1].message == "This activity has not started yet"


@pytest.mark.asyncio
async def test_join_after_end_is_rejected(service, clock, activity_row):
    clock.advance(hours=1, seconds=1)
    view = StudentView(service, clock=clock)

    assert await view.join_activity("QW3RTY") is JoinOutcome.ENDED
    assert view.current_activity is None
    assert view.notices[-1].message == "This activity has ended"


@pytest.mark.asyncio
async def test_join_inside_window_stores_activity_and_subscribes(service, clock, activity_row):
    clock.advance(minutes=30)
    view = StudentView(service, clock=clock)

    assert await view.join_activity("qw3rty") is JoinOutcome.JOINED

    assert str(view.current_activity.id) == activity_row["id"]
    assert view.feed.state is FeedState.SUBSCRIBED
    assert view.notices[-1].kind is NoticeKind.SUCCESS
    assert view.notices[-1].message == "Joined activity successfully"
    await view.close()


@pytest.mark.asyncio
async def test_join_on_window_boundaries(service, clock, activity_row):
    view = StudentView(service, clock=clock)
    assert await view.join_activity("QW3RTY") is JoinOutcome.JOINED

    clock.advance(hours=1)
    assert await view.join_activity("QW3RTY") is JoinOutcome.JOINED
    await view.close()


@pytest.mark.asyncio
async def test_unknown_code_is_invalid(service, clock, activity_row):
    view = StudentView(service, clock=clock)

    assert await view.join_activity("NOPE00") is JoinOutcome.INVALID_CODE
    assert view.notices[-1].kind is NoticeKind.ERROR
    assert view.notices[-1].message == "Invalid access code"


@pytest.mark.asyncio
async def test_colliding_codes_are_invalid(service, clock, activity_row):
    service.add(
        ACTIVITIES,
        title="Networks",
        description="",
        access_code="QW3RTY",
        start_time=clock.now,
        end_time=clock.now + timedelta(hours=1),
    )
    view = StudentView(service, clock=clock)

    assert await view.join_activity("QW3RTY") is JoinOutcome.INVALID_CODE


@pytest.mark.asyncio
async def test_submit_without_joining_writes_nothing(service, clock, activity_row):
    view = StudentView(service, clock=clock)

    assert await view.submit_feedback("happy") is None
    assert service.writes == []
    assert view.notices == []


@pytest.mark.asyncio
async def test_submit_appends_feedback_and_sees_it_live(service, clock, activity_row):
    view = StudentView(service, clock=clock)
    await view.join_activity("QW3RTY")

    record = await view.submit_feedback(EmotionType.CONFUSED)
    await view.submit_feedback("confused")

    assert record.emotion_type is EmotionType.CONFUSED
    assert [row["emotion_type"] for _, row in service.writes] == ["confused", "confused"]
    assert [f.emotion_type for f in view.feedback] == [EmotionType.CONFUSED, EmotionType.CONFUSED]
    assert view.notices[-1].message == "Feedback submitted"
    await view.close()


@pytest.mark.asyncio
async def test_submit_failure_reports_notice(service, clock, activity_row):
    view = StudentView(service, clock=clock)
    await view.join_activity("QW3RTY")
    service.fail_writes = True

    assert await view.submit_feedback("sad") is None
    assert service.tables[FEEDBACK] == []
    assert view.notices[-1].message == "Error submitting feedback"
    await view.close()


@pytest.mark.asyncio
async def test_submit_rejects_unknown_emotion(service, clock, activity_row):
    view = StudentView(service, clock=clock)
    await view.join_activity("QW3RTY")

    with pytest.raises(ValueError):
        await view.submit_feedback("bored")
    assert service.writes == []
    await view.close()


@pytest.mark.asyncio
async def test_joining_another_code_replaces_feed(service, clock, activity_row):
    service.add(
        ACTIVITIES,
        title="Networks",
        description="",
        access_code="N3TW0R",
        start_time=clock.now,
        end_time=clock.now + timedelta(hours=1),
    )
    view = StudentView(service, clock=clock)
    await view.join_activity("QW3RTY")
    first_feed = view.feed

    await view.join_activity("N3TW0R")

    assert first_feed.state is FeedState.TORN_DOWN
    assert view.current_activity.access_code == "N3TW0R"
    assert service.notifier.channel_count == 1
    await view.close()
