"""Use case deleting provider copies left behind by failed generations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.application.use_cases.audit_logs import record_audit_event
from app.domain.document_provider import DocumentProvider
from app.domain.entities import AUDIT_OPERATION_COPY_SWEPT, DOCUMENT_STATUS_ABANDONED
from app.domain.exceptions import DocumentWorkflowError
from app.infrastructure.repositories import DocumentRecordRepository

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of a sweep over abandoned documents."""

    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def sweep_abandoned_documents(
    session: Session, provider: DocumentProvider, *, dry_run: bool = False
) -> SweepReport:
    """Delete the provider copy of every ``abandoned`` record that still has one.

    Swept records keep their status and lose their ``template_copy_id``. A
    failed deletion is reported and left for the next sweep.
    """

    repository = DocumentRecordRepository(session)
    report = SweepReport()
    for record in repository.list(status=DOCUMENT_STATUS_ABANDONED):
        if not record.template_copy_id:
            continue
        if dry_run:
            report.deleted.append(record.id)
            continue
        try:
            provider.delete_document(record.template_copy_id)
        except DocumentWorkflowError as exc:
            logger.warning(
                "Could not delete provider copy %s of document %s: %s",
                record.template_copy_id,
                record.id,
                exc.message,
            )
            report.failed[record.id] = exc.message
            continue

        copy_id = record.template_copy_id
        record.template_copy_id = None
        repository.update(record)
        record_audit_event(
            session,
            document_id=record.id,
            operation=AUDIT_OPERATION_COPY_SWEPT,
            detail=f"provider copy {copy_id} deleted",
        )
        report.deleted.append(record.id)
    return report


__all__ = ["SweepReport", "sweep_abandoned_documents"]
