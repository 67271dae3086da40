"""Main application entrypoint for the asset broker."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from assetbroker.api.middleware import HTTPErrorLoggingMiddleware
from assetbroker.api.v1 import routes_health
from assetbroker.api.v1.routes_asset import router as asset_router
from assetbroker.core.config import settings
from assetbroker.core.exceptions import AssetBrokerError, ReservationError
from assetbroker.core.logging import setup_logging
from assetbroker.services.container import AssetServices, build_services

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Unexpected internal error."
UNAVAILABLE_MESSAGE = "Could not reserve an asset id, please retry."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build store clients once per process and log startup."""
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)

    logger.info(
        f"Asset broker starting on port: {settings.PORT}",
        extra={
            "bucket": settings.BUCKET_NAME,
            "table": settings.TABLE_NAME,
            "object_store": settings.OBJECT_STORE_BACKEND,
            "record_store": settings.RECORD_STORE_BACKEND,
        },
    )
    yield
    logger.info("Asset broker shutting down")


async def asset_error_handler(request: Request, exc: AssetBrokerError) -> JSONResponse:
    """Map domain exceptions to responses without leaking internal detail."""
    if isinstance(exc, ReservationError):
        logger.error(f"Reservation failed: {exc}", exc_info=exc)
        detail = UNAVAILABLE_MESSAGE
    elif exc.status_code >= 500:
        logger.error(f"Internal error: {exc}", exc_info=exc)
        detail = INTERNAL_ERROR_MESSAGE
    else:
        detail = str(exc)

    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


def create_app(services: Optional[AssetServices] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Prebuilt services; built from settings at startup when None

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(HTTPErrorLoggingMiddleware)
    app.add_exception_handler(AssetBrokerError, asset_error_handler)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(asset_router)

    return app


# Export app instance for ASGI servers
app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
