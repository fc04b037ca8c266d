"""Export of provider-side documents to local PDF files."""

from __future__ import annotations

import logging
from pathlib import Path

from app.domain.document_provider import DocumentProvider
from app.domain.exceptions import DocumentWorkflowError, ExportFailedError
from app.infrastructure.storage import sanitize_filename, write_atomically

logger = logging.getLogger(__name__)


def build_pdf_path(directory: Path, local_name: str) -> Path:
    return directory / f"{sanitize_filename(local_name)}.pdf"


def export_pdf(
    provider: DocumentProvider,
    document_id: str,
    local_name: str,
    directory: Path,
) -> Path:
    """Stream the PDF rendering of ``document_id`` to ``directory`` and return its path.

    The stream lands in a temporary file that only replaces the destination on
    completion, so a failed transfer never leaves a truncated PDF behind.
    """

    destination = build_pdf_path(directory, local_name)
    try:
        write_atomically(destination, lambda handle: provider.write_pdf(document_id, handle))
    except DocumentWorkflowError:
        raise
    except OSError as exc:
        raise ExportFailedError(f"Could not write {destination.name}: {exc}") from exc
    logger.info("Document saved to %s", destination)
    return destination


__all__ = ["build_pdf_path", "export_pdf"]
