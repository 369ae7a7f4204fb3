import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shopdesk.config import Settings, get_settings
from shopdesk.core.errors import ValidationError
from shopdesk.core.logging import setup_logging
from shopdesk.database import init_db
from shopdesk.routers import health_router, rpc_router
from shopdesk.rpc import load_handlers
from shopdesk.schemas.common import validation_message

settings: Settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    init_db()
    load_handlers()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(rpc_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unreadable request bodies get the same envelope as any other failed call."""
    message = validation_message(exc)
    logger.warning("Rejected request to %s: %s", request.url.path, message)
    return JSONResponse(status_code=200, content=ValidationError(message).to_envelope())


__all__ = ["app"]
