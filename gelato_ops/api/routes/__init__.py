"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from gelato_ops.api.routes import auth, clients, health, orders, reports, statements, templates


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(statements.router, tags=["statements"])
    api_router.include_router(orders.router, tags=["orders"])
    api_router.include_router(reports.router, tags=["reports"])
    api_router.include_router(templates.router, tags=["templates"])
    api_router.include_router(clients.router, tags=["clients"])

    application.include_router(api_router)


__all__ = ["register_routes"]
