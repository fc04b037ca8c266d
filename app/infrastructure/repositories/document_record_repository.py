"""Persistence helpers for document records."""

from sqlalchemy.orm import Session

from app.domain.entities import DocumentRecord
from app.infrastructure.models import DocumentRecordModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class DocumentRecordRepository:
    """Provide load, append and update-by-id operations for document records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        status: str | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[DocumentRecord]:
        query = self.session.query(DocumentRecordModel)
        if status is not None:
            query = query.filter(DocumentRecordModel.status == status)
        query = query.order_by(DocumentRecordModel.created_at.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, document_id: str) -> DocumentRecord | None:
        model = self.session.get(DocumentRecordModel, document_id)
        return self._to_entity(model) if model else None

    def create(self, record: DocumentRecord) -> DocumentRecord:
        model = DocumentRecordModel(id=record.id)
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, record: DocumentRecord) -> DocumentRecord:
        model = self.session.get(DocumentRecordModel, record.id)
        if model is None:
            msg = f"Document record with id {record.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: DocumentRecordModel) -> DocumentRecord:
        return DocumentRecord(
            id=model.id,
            name=model.name,
            template_copy_id=model.template_copy_id,
            otp=model.otp,
            status=model.status,
            pdf_path=model.pdf_path,
            failed_stage=model.failed_stage,
            created_at=ensure_app_timezone(model.created_at),
            otp_issued_at=ensure_app_timezone(model.otp_issued_at),
            signed_at=ensure_app_timezone(model.signed_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: DocumentRecordModel, record: DocumentRecord) -> None:
        model.name = record.name
        model.template_copy_id = record.template_copy_id
        model.otp = record.otp
        model.status = record.status
        model.pdf_path = record.pdf_path
        model.failed_stage = record.failed_stage
        if record.created_at is not None:
            model.created_at = ensure_app_naive_datetime(record.created_at)
        model.otp_issued_at = ensure_app_naive_datetime(record.otp_issued_at)
        model.signed_at = ensure_app_naive_datetime(record.signed_at)


__all__ = ["DocumentRecordRepository"]
