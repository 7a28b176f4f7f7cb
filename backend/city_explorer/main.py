"""FastAPI application factory and lifespan for City Explorer."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import PlainTextResponse

from .api.router import api_router
from .config import settings
from .errors import CityExplorerError
from .models.database import close_database, init_database

# Configure logging for our app (uvicorn only configures its own loggers)
logging.basicConfig(
    level=settings.log_level,
    format="%(levelname)s:     %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Sorry, something went wrong"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: create tables on startup, release the pool on shutdown."""
    init_database()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    close_database()
    logger.info("Application shutdown complete")


async def _core_error_handler(request: Request, exc: CityExplorerError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return PlainTextResponse(ERROR_MESSAGE, status_code=500)


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=exc)
    return PlainTextResponse(ERROR_MESSAGE, status_code=500)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="City Explorer",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CityExplorerError, _core_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(api_router)

    return app


# Application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
