from pulse.api import ActivitiesController, websocket_handler

ROUTES = [
    ActivitiesController,
    websocket_handler,
]
