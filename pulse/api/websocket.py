"""WebSocket handler delivering feedback inserts to browsers."""

import json
import logging
import uuid

from litestar import WebSocket, websocket
from litestar.exceptions import WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.models import Activity
from pulse.realtime import RowFilter, notifier
from pulse.store import FEEDBACK

logger = logging.getLogger("Pulse.WebSocket")


@websocket("/ws/activities/{activity_id:uuid}/feedback")
async def feedback_websocket(
    socket: WebSocket,
    activity_id: uuid.UUID,
    session: AsyncSession,
) -> None:
    """
    Realtime feedback stream for one activity.

    Protocol:
    - Server sends {"type": "subscribed", "channel": "...", "filter": "..."} once
      the channel is live
    - Server sends {"type": "INSERT", "table": "feedback", "new": {...}} for
      every feedback row inserted afterwards
    - Client may send {"type": "ping"}, answered with {"type": "pong"}

    There is no replay: rows inserted before "subscribed" are fetched over
    HTTP by the client.
    """
    await socket.accept()

    activity = await session.get(Activity, activity_id)
    if not activity:
        await socket.send_json({"type": "error", "message": f"Activity '{activity_id}' not found"})
        await socket.close()
        return

    row_filter = RowFilter.eq("activity_id", activity_id)
    channel = notifier.channel(f"ws-feedback-{activity_id}-{uuid.uuid4().hex[:8]}")
    channel.on_insert(FEEDBACK, socket.send_json, row_filter)
    await channel.subscribe()
    logger.info(f"WebSocket subscribed to feedback for activity {activity_id}")

    try:
        await socket.send_json({"type": "subscribed", "channel": channel.name, "filter": str(row_filter)})

        while True:
            try:
                data = await socket.receive_json()
            except json.JSONDecodeError:
                await socket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            msg_type = data.get("type") if isinstance(data, dict) else None
            if msg_type == "ping":
                await socket.send_json({"type": "pong"})
            else:
                await socket.send_json({"type": "error", "message": f"Unknown message type: {msg_type}"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for activity {activity_id}")

    except Exception as e:
        logger.exception(f"WebSocket error for activity {activity_id}: {e}")

    finally:
        await channel.unsubscribe()


# Export the websocket handler for use in routes
websocket_handler = feedback_websocket
