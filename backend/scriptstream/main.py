import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from scriptstream.api.main import api_router
from scriptstream.core.config import settings
from scriptstream.core.diagnostics import describe_fault, render_fault_html
from scriptstream.core.errors import InterpreterFault, ResourceUnavailable
from scriptstream.engines.script import close_resource_cache

logging.basicConfig(level=settings.LOG_LEVEL)
_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Shared cache holds an httpx.Client for remote resources
    close_resource_cache()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Exception handlers: script faults are reported, never fatal to the process
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with a human-readable detail string instead of raw Pydantic errors."""
    errors = exc.errors()
    messages = []
    for err in errors:
        loc = " → ".join(str(l) for l in err.get("loc", []) if l != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=422,
        content={"detail": "; ".join(messages)},
    )


@app.exception_handler(ResourceUnavailable)
async def resource_unavailable_handler(
    request: Request, exc: ResourceUnavailable
) -> JSONResponse:
    """A file/URL step could not be resolved: 422 with the escaped diagnostic."""
    _logger.warning("Resource unavailable on %s: %s", request.url.path, describe_fault(exc))
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": str(exc), "data": render_fault_html(exc)},
    )


@app.exception_handler(InterpreterFault)
async def interpreter_fault_handler(
    request: Request, exc: InterpreterFault
) -> JSONResponse:
    """The assembled script failed in the interpreter: 500 with the escaped diagnostic."""
    _logger.error("Interpreter fault on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Script execution failed", "data": render_fault_html(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions: log and return 500 with a safe message."""
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = "Internal server error"
    if settings.ENVIRONMENT == "local":
        detail = f"Internal server error: {exc}"
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)
