import logging
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from pushrelay.api.router import api_router
from pushrelay.core.config import Settings, get_settings
from pushrelay.core.exceptions import ClientInputError, ConfigurationError
from pushrelay.core.limiter import limiter
from pushrelay.services.delivery import DeliveryEngine
from pushrelay.services.registry import SubscriptionRegistry
from pushrelay.services.relay import PushRelay
from pushrelay.services.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_relay(settings: Settings) -> PushRelay:
    """Create the registry (loaded from disk) and the delivery engine."""
    registry = SubscriptionRegistry(SubscriptionStore(settings.SUBSCRIPTIONS_FILE))
    registry.load()
    engine = DeliveryEngine(
        vapid_private_key=settings.VAPID_PRIVATE_KEY,
        vapid_claims_email=settings.VAPID_CLAIMS_EMAIL,
        ttl=settings.PUSH_TTL,
        max_concurrency=settings.PUSH_MAX_CONCURRENCY,
    )
    return PushRelay(registry, engine)


def create_application(settings: Settings | None = None, relay: PushRelay | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0")

    app.state.settings = settings
    app.state.relay = relay or build_relay(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.exception_handler(ClientInputError)
    async def client_input_exception_handler(request: Request, exc: ClientInputError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Optional front-end: static/ with index.html and the service worker
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        logger.info(f"Static files directory: {static_dir.resolve()}")
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

        @app.get("/", include_in_schema=False)
        def serve_index() -> FileResponse:
            return FileResponse(static_dir / "index.html")

    return app


def run() -> None:
    """Console entry point: validate configuration, then serve."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.critical(str(e))
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL)
    app = create_application(settings)
    logger.info(f"Server listening on port {settings.PORT}")
    logger.info(f"Open http://localhost:{settings.PORT} to view the front-end")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
