import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings
from app.domain.document_provider import DocumentProvider
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.google_documents import GoogleDocumentProvider
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def _build_lifespan(document_provider: DocumentProvider | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the database and document provider, then release them on shutdown."""

        settings: Settings = app.state.settings
        initialize_database()
        settings.documents_dir.mkdir(parents=True, exist_ok=True)

        provider = document_provider
        if provider is None:
            provider = GoogleDocumentProvider.from_service_account_file(
                settings.credentials_path,
                timeout=settings.provider_timeout_seconds,
            )
        app.state.document_provider = provider
        logger.info("Document signing API ready on port %s", settings.port)
        try:
            yield
        finally:
            provider.close()
            app.state.document_provider = None
            engine.dispose()

    return lifespan


def create_app(
    document_provider: DocumentProvider | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Document Signing API",
        lifespan=_build_lifespan(document_provider),
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().port)
