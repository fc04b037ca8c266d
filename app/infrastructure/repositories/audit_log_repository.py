"""Persistence layer for audit log records."""

from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import AuditLog
from app.infrastructure.models import AuditLogModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class AuditLogRepository:
    """Provide append and lookup helpers for :class:`AuditLog` entries."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: AuditLog) -> AuditLog:
        model = AuditLogModel()
        self._apply_entity_to_model(model, entry)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, entry_id: int) -> AuditLog | None:
        """Return an audit entry by its primary key, if present."""

        model = self.session.get(AuditLogModel, entry_id)
        if model is None:
            return None
        return self._to_entity(model)

    def list(self, *, document_id: str | None = None) -> list[AuditLog]:
        """Return audit entries in insertion order, optionally for one document."""

        query = self.session.query(AuditLogModel)
        if document_id is not None:
            query = query.filter(AuditLogModel.document_id == document_id)

        models: Iterable[AuditLogModel] = query.order_by(AuditLogModel.id).all()
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _to_entity(model: AuditLogModel) -> AuditLog:
        return AuditLog(
            id=model.id,
            document_id=model.document_id,
            operation=model.operation,
            detail=model.detail,
            created_at=ensure_app_timezone(model.created_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: AuditLogModel, entry: AuditLog) -> None:
        model.document_id = entry.document_id
        model.operation = entry.operation
        model.detail = entry.detail
        model.created_at = ensure_app_naive_datetime(
            entry.created_at or now_in_app_timezone()
        )


__all__ = ["AuditLogRepository"]
