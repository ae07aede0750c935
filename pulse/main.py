import logging

from litestar import Litestar, Request
from litestar.exceptions import HTTPException
from litestar.plugins.sqlalchemy import SQLAlchemyAsyncConfig, SQLAlchemyInitPlugin
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from pulse.config import DATABASE_URL, DEBUG
from pulse.models import Base
from pulse.routes import ROUTES

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("Pulse")

logger.info(f"Starting app in {'DEBUG' if DEBUG else 'PRODUCTION'} mode")
logger.info(f"Database URL: {DATABASE_URL.split('@')[-1]}")

# --- SQLAlchemy config
config = SQLAlchemyAsyncConfig(
    connection_string=DATABASE_URL,
    session_dependency_key="session",
    metadata=Base.metadata,
    create_all=DEBUG,  # Auto-create tables on startup (dev only)
)
plugin = SQLAlchemyInitPlugin(config)


# --- Exception handlers
def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    content = {"status_code": exc.status_code, "detail": exc.detail}
    if exc.extra:
        content["extra"] = exc.extra
    return Response(content=content, status_code=exc.status_code, media_type="application/json")


def log_exceptions(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled exception occurred", exc_info=exc)
    return Response(
        content={"detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json"
    )


# --- App init
app = Litestar(
    route_handlers=ROUTES,
    debug=DEBUG,
    plugins=[plugin],
    exception_handlers={
        HTTPException: handle_http_exception,
        Exception: log_exceptions,
    }
)
