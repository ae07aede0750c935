"""Pulse API routes."""

from pulse.api.activities import ActivitiesController
from pulse.api.websocket import websocket_handler

__all__ = ["ActivitiesController", "websocket_handler"]
