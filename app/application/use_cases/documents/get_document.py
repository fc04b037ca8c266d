"""Use cases reading document records."""

from sqlalchemy.orm import Session

from app.domain.entities import DOCUMENT_STATUSES, DocumentRecord
from app.domain.exceptions import RecordNotFoundError
from app.infrastructure.repositories import DocumentRecordRepository


def get_document(session: Session, document_id: str) -> DocumentRecord:
    """Return the record identified by ``document_id`` or raise ``RecordNotFoundError``."""

    record = DocumentRecordRepository(session).get(document_id)
    if record is None:
        raise RecordNotFoundError(f"Document {document_id} not found")
    return record


def list_documents(
    session: Session,
    *,
    status: str | None = None,
    skip: int = 0,
    limit: int | None = 100,
) -> list[DocumentRecord]:
    """Return document records, newest first, optionally filtered by status."""

    if status is not None and status not in DOCUMENT_STATUSES:
        raise ValueError(f"Unknown document status {status!r}")
    return DocumentRecordRepository(session).list(status=status, skip=skip, limit=limit)


__all__ = ["get_document", "list_documents"]
