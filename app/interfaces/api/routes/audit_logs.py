"""Routes for inspecting audit log entries."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.audit_logs import (
    get_audit_log as get_audit_log_uc,
    list_audit_logs as list_audit_logs_uc,
)
from app.domain.entities import AuditLog
from app.infrastructure.database import get_db
from app.interfaces.api.schemas import AuditLogRead

router = APIRouter(prefix="/audit-logs", tags=["audit_logs"])


def _audit_log_to_read_model(entry: AuditLog) -> AuditLogRead:
    return AuditLogRead.model_validate(entry)


@router.get("/", response_model=list[AuditLogRead])
def list_audit_logs(
    document_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[AuditLogRead]:
    """Return audit log entries optionally filtered by document."""

    entries = list_audit_logs_uc(db, document_id=document_id)
    return [_audit_log_to_read_model(entry) for entry in entries]


@router.get("/{entry_id}", response_model=AuditLogRead)
def read_audit_log(
    entry_id: int,
    db: Session = Depends(get_db),
) -> AuditLogRead:
    """Return the audit log entry identified by ``entry_id``."""

    try:
        entry = get_audit_log_uc(db, entry_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _audit_log_to_read_model(entry)


__all__ = ["router"]
