# backend/ticketing/main.py

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from . import models  # noqa: F401  registers tables on Base.metadata
from .api import api_chat, api_event
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

# Local runs create the schema directly; managed databases use Alembic.
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME, default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz", tags=["health"])
def healthz():
    """Liveness probe; does not touch the DB."""
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors in the shared error body and log them."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)

    field_errors = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field_errors[".".join(loc) or "body"] = err.get("msg", "invalid")

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {
                "message": "Request validation failed",
                "field_errors": field_errors,
            }
        },
    )


api_prefix = settings.API_V1_STR  # usually something like "/api/v1"

# ─── CHAT ROUTES (under /api/v1/chat) ───────────────────────────────────────────────
app.include_router(api_chat.router, prefix=f"{api_prefix}", tags=["chat"])

# ─── EVENT ROUTES (under /api/v1/events) ────────────────────────────────────────────
app.include_router(api_event.router, prefix=f"{api_prefix}", tags=["events"])
