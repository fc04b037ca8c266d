"""Use case generating a personalized document from a template."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session

from app.application.use_cases.audit_logs import record_audit_event
from app.application.use_cases.documents.export_pdf import export_pdf
from app.application.use_cases.documents.otp import generate_otp
from app.application.use_cases.documents.placeholders import substitute_placeholders
from app.config import Settings, get_settings
from app.domain.document_provider import DocumentProvider
from app.domain.entities import (
    AUDIT_OPERATION_GENERATED,
    AUDIT_OPERATION_GENERATION_FAILED,
    DOCUMENT_STATUS_ABANDONED,
    DOCUMENT_STATUS_CREATED,
    DOCUMENT_STATUS_PENDING,
    DocumentRecord,
)
from app.domain.exceptions import DocumentWorkflowError
from app.infrastructure.repositories import DocumentRecordRepository
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def build_document_name(title: str, information: Mapping[str, Any]) -> str:
    """Return ``<title>_<firstname>_<lastname>``."""

    firstname = information.get("firstname", "")
    lastname = information.get("lastname", "")
    return f"{title}_{firstname}_{lastname}"


def build_sign_url(settings: Settings, document_id: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/sign/{document_id}"


def generate_document(
    session: Session,
    provider: DocumentProvider,
    *,
    template_id: str,
    information: Mapping[str, Any],
    settings: Settings | None = None,
) -> DocumentRecord:
    """Copy ``template_id``, fill its placeholders, export it and mint an OTP.

    The record is stored as ``pending`` right after the provider copy exists.
    If substitution or export then fails it is marked ``abandoned`` so the
    orphaned copy can be swept later, and the original error propagates.
    """

    settings = settings or get_settings()
    repository = DocumentRecordRepository(session)

    title = provider.get_document_title(template_id)
    name = build_document_name(title, information)
    copy_id = provider.copy_document(template_id, name)

    record = repository.create(
        DocumentRecord(
            id=uuid4().hex,
            name=name,
            template_copy_id=copy_id,
            otp=None,
            status=DOCUMENT_STATUS_PENDING,
            pdf_path=None,
            failed_stage=None,
            created_at=now_in_app_timezone(),
            otp_issued_at=None,
            signed_at=None,
        )
    )

    try:
        substitute_placeholders(provider, copy_id, information)
        pdf_path = export_pdf(
            provider, copy_id, f"{name}_{record.id}", settings.documents_dir
        )
    except DocumentWorkflowError as exc:
        record.status = DOCUMENT_STATUS_ABANDONED
        record.failed_stage = exc.stage
        repository.update(record)
        record_audit_event(
            session,
            document_id=record.id,
            operation=AUDIT_OPERATION_GENERATION_FAILED,
            detail=f"{exc.stage}: {exc.message}",
        )
        logger.warning(
            "Generation of document %s failed at %s; provider copy %s is orphaned",
            record.id,
            exc.stage,
            copy_id,
        )
        raise

    record.otp = generate_otp()
    record.otp_issued_at = now_in_app_timezone()
    record.status = DOCUMENT_STATUS_CREATED
    record.pdf_path = str(pdf_path)
    record = repository.update(record)
    record_audit_event(
        session,
        document_id=record.id,
        operation=AUDIT_OPERATION_GENERATED,
        detail=f"template {template_id}",
    )
    logger.info(
        "Document %s was generated, go to %s to sign it",
        record.id,
        build_sign_url(settings, record.id),
    )
    return record


__all__ = ["build_document_name", "build_sign_url", "generate_document"]
