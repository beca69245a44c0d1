import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dashboard.api.v1 import health, metrics
from dashboard.config import settings
from dashboard.dependencies import get_metrics_service
from dashboard.middleware import ErrorHandlingMiddleware, LoggingMiddleware

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Only close the shared service if a request created it
    if get_metrics_service.cache_info().currsize:
        logger.info("🔌 Closing New Relic HTTP client")
        get_metrics_service().close()
        get_metrics_service.cache_clear()

def create_app() -> FastAPI:
    app = FastAPI(
        title="New Relic Dashboard API",
        description="New Relic application metrics shaped for dashboard widgets",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added is first executed
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware, enable_error_logging=True)

    # Mount routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(metrics.router, prefix="/api/v1")

    if not settings.newrelic_api_key:
        logger.warning("⚠️ NEWRELIC_API_KEY not set; requests must pass apiKey")

    return app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    print(f"🌐 Server: http://localhost:{port}")

    uvicorn.run(
        "dashboard.main:app",
        host="0.0.0.0",
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
    )
