"""Interface of the external service hosting templates and rendering documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Mapping, Protocol, Sequence


class DocumentProvider(Protocol):
    """Capabilities the signing workflow needs from the document provider.

    Implementations translate their own failures into the errors of
    :mod:`app.domain.exceptions` and block until each call completes.
    """

    def get_document_title(self, document_id: str) -> str:
        """Return the title of ``document_id`` or raise ``TemplateNotFoundError``."""

    def copy_document(self, document_id: str, name: str) -> str:
        """Copy ``document_id`` under ``name`` and return the copy handle."""

    def batch_update(
        self, document_id: str, requests: Sequence[Mapping[str, Any]]
    ) -> None:
        """Apply every request atomically or raise ``SubstitutionFailedError``."""

    def replace_text_with_image(
        self,
        document_id: str,
        marker: str,
        image_path: Path,
        *,
        width: int,
        height: int,
    ) -> None:
        """Replace the first ``marker`` occurrence with the image at ``image_path``."""

    def write_pdf(self, document_id: str, handle: BinaryIO) -> None:
        """Stream the PDF rendering of ``document_id`` into ``handle``."""

    def delete_document(self, document_id: str) -> None:
        """Delete the provider-side document ``document_id``."""

    def close(self) -> None:
        """Release the resources held by the client."""


__all__ = ["DocumentProvider"]
