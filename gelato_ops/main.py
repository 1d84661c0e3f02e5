"""FastAPI application entrypoint."""
from __future__ import annotations

from fastapi import FastAPI

from gelato_ops.api.routes import register_routes
from gelato_ops.core.config import Settings, get_settings
from gelato_ops.core.logging import configure_logging
from gelato_ops.db.session import engine
from gelato_ops.obs import (
    PrometheusMiddleware,
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    metrics_router,
    record_mutation,
)
from gelato_ops.services.events import change_notifier

CHANGE_CHANNELS = ("statements", "orders", "templates", "clients", "prices")


def create_application(settings: Settings | None = None) -> FastAPI:
    """Application factory used by ASGI servers and tests."""
    configure_logging()
    settings = settings or get_settings()

    if settings.enable_tracing:
        initialise_tracing(service_name=settings.app_name, endpoint=settings.otel_exporter_endpoint)
        instrument_sqlalchemy_engine(engine)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    if settings.enable_metrics:
        application.add_middleware(PrometheusMiddleware)
        application.include_router(metrics_router)
        for channel in CHANGE_CHANNELS:
            change_notifier.subscribe(channel, record_mutation)

    register_routes(application)

    if settings.enable_tracing:
        instrument_fastapi_app(application)

    return application


app = create_application()
