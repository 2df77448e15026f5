"""FastAPI application factory"""

import logging
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from vividpulse_insights.api.dependencies import get_credential_resolver, get_request_id
from vividpulse_insights.api.middleware import RequestIDMiddleware, MetricsMiddleware
from vividpulse_insights.api.v1 import insights
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import InvalidTransactionError
from vividpulse_insights.infrastructure.credentials import CredentialResolver
from vividpulse_insights.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


async def invalid_transaction_handler(request: Request, exc: InvalidTransactionError) -> JSONResponse:
    logger.warning(f"Invalid transaction: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="VividPulse Insights",
        description="Financial health insights with optional AI augmentation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(InvalidTransactionError, invalid_transaction_handler)

    @app.get("/health")
    def health_check(resolver: CredentialResolver = Depends(get_credential_resolver)):
        """Liveness plus AI readiness; only the credential's variable name is reported"""
        credential = resolver.resolve()
        return {
            "status": "ok",
            "service": settings.service_name,
            "aiProvider": settings.ai_provider,
            "aiCredentialSource": credential.source if credential else None,
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(insights.router, prefix="/v1", tags=["insights"])

    return app


app = create_app()
