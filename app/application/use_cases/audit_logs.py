"""Use cases for interacting with audit log entries."""

from sqlalchemy.orm import Session

from app.domain.entities import AuditLog
from app.infrastructure.repositories import AuditLogRepository
from app.utils import now_in_app_timezone


def record_audit_event(
    session: Session, *, document_id: str, operation: str, detail: str | None = None
) -> AuditLog:
    """Append an audit entry describing a document workflow transition."""

    repository = AuditLogRepository(session)
    return repository.create(
        AuditLog(
            id=None,
            document_id=document_id,
            operation=operation,
            detail=detail,
            created_at=now_in_app_timezone(),
        )
    )


def list_audit_logs(
    session: Session, *, document_id: str | None = None
) -> list[AuditLog]:
    """Return audit log entries optionally filtered by document."""

    repository = AuditLogRepository(session)
    return repository.list(document_id=document_id)


def get_audit_log(session: Session, entry_id: int) -> AuditLog:
    """Return an audit log entry identified by ``entry_id`` or raise an error."""

    repository = AuditLogRepository(session)
    entry = repository.get(entry_id)
    if entry is None:
        raise ValueError("Audit log entry not found")
    return entry


__all__ = [
    "get_audit_log",
    "list_audit_logs",
    "record_audit_event",
]
