"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from app.config import Settings, get_settings
from app.domain.document_provider import DocumentProvider


def get_document_provider(request: Request) -> DocumentProvider:
    """Return the document provider built during application startup."""

    provider = getattr(request.app.state, "document_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Document provider is not configured",
        )
    return provider


def get_app_settings(request: Request) -> Settings:
    """Return the settings bound to the application, falling back to the environment."""

    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


__all__ = ["get_app_settings", "get_document_provider"]
