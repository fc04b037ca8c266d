from fastapi import FastAPI

from .audit_logs import router as audit_logs_router
from .documents import router as documents_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(documents_router)
    app.include_router(audit_logs_router)
