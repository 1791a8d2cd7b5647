import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import (
    AstroEngineError,
    ChartNotFound,
    InvalidDateFormat,
    InvalidDateRange,
    InvalidPhaseName,
    InvalidLocation,
    InvalidTimezone,
    MissingLocation,
)
from .routers import charts as charts_router
from .routers import ephemeris as ephemeris_router
from .routers import lunar as lunar_router
from .routers import zodiac as zodiac_router
from .middleware.auth import APIKeyMiddleware
from .middleware.ratelimit import RateLimitMiddleware
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)

app = FastAPI(title="cosmic-wellness-engine", version="0.3.0")

# Configure CORS - localhost for development, production domains for production
app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=86400,
    )
else:
    allowed = [
        "https://cosmicwellness.app",
        "https://www.cosmicwellness.app",
        "https://api.cosmicwellness.app",
    ]
    preview = os.getenv("PREVIEW_ORIGIN")  # e.g. a deploy preview URL
    if preview:
        allowed.append(preview)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=86400,
    )

# Outermost last: auth runs before the rate limiter so limits are keyed per API key
app.add_middleware(RateLimitMiddleware)
app.add_middleware(APIKeyMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(charts_router.router)
app.include_router(ephemeris_router.router)
app.include_router(lunar_router.router)
app.include_router(zodiac_router.router)


# Exception Handlers
_STATUS_BY_ERROR = {
    InvalidDateFormat: 400,
    InvalidDateRange: 400,
    InvalidTimezone: 400,
    InvalidPhaseName: 400,
    MissingLocation: 422,
    InvalidLocation: 422,
    ChartNotFound: 404,
}


@app.exception_handler(AstroEngineError)
async def astro_error_handler(request: Request, exc: AstroEngineError):
    """Map engine errors to typed JSON failures."""
    status = _STATUS_BY_ERROR.get(type(exc), 400)
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
            "detail": None,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.get("/__health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"message": "cosmic-wellness-engine API is running. See /__health and /docs."}
