import uvicorn
import time
import logging
from typing import Optional
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from diffshield.api.health import router as health_router
from diffshield.api.stats import build_stats_router
from diffshield.api.webhook import (
    ReviewInputsLoader,
    ReviewReportSink,
    build_webhook_router,
)
from diffshield.core.config import PORT
from diffshield.core.constants import SERVICE_NAME, SERVICE_VERSION
from diffshield.llm.strategies import ReviewPipeline
from diffshield.services.stats_repository import (
    InMemoryUsageStatsRepository,
    UsageStatsRepository,
)
from diffshield.utils.logging_config import setup_logging

# Initialize enhanced logging
setup_logging(level=logging.INFO)
logger = logging.getLogger("main")


# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Incoming: {request.method} {request.url.path} from {client_host}")

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"Outgoing: {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Time: {process_time:.2f}ms"
            )
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise e


def create_app(
    stats: Optional[UsageStatsRepository] = None,
    pipeline: Optional[ReviewPipeline] = None,
    inputs_loader: Optional[ReviewInputsLoader] = None,
    report_sink: Optional[ReviewReportSink] = None,
) -> FastAPI:
    """Build the webhook service with its collaborators injected."""
    stats = stats or InMemoryUsageStatsRepository()
    pipeline = pipeline or ReviewPipeline()

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION)
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(build_stats_router(stats))
    app.include_router(build_webhook_router(stats, pipeline, inputs_loader, report_sink))
    return app


app = create_app()

if __name__ == "__main__":
    logger.info(f"{SERVICE_NAME} listening on port {PORT}")
    logger.info("Webhook endpoint: /webhook")
    logger.info("Stats endpoint: /stats")
    uvicorn.run("main:app", host="0.0.0.0", port=PORT)
