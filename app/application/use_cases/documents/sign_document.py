"""Use case completing a document with the signer's handwriting and a digital stamp."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.orm import Session

from app.application.use_cases.audit_logs import record_audit_event
from app.application.use_cases.documents.export_pdf import build_pdf_path, export_pdf
from app.application.use_cases.documents.locks import DocumentLockRegistry, document_locks
from app.application.use_cases.documents.otp import validate_otp
from app.application.use_cases.documents.placeholders import substitute_placeholders
from app.application.use_cases.documents.signature_image import embed_signature_image
from app.config import Settings, get_settings
from app.domain.document_provider import DocumentProvider
from app.domain.entities import (
    AUDIT_OPERATION_OTP_REJECTED,
    AUDIT_OPERATION_SIGNED,
    AUDIT_OPERATION_SIGN_FAILED,
    DOCUMENT_STATUS_SIGNED,
    DOCUMENT_STATUS_SIGN_FAILED,
    DocumentRecord,
)
from app.domain.exceptions import (
    DocumentWorkflowError,
    OtpMismatchError,
    SigningFailedError,
    RecordNotFoundError,
)
from app.infrastructure.pdf_signing import sign_pdf
from app.infrastructure.repositories import DocumentRecordRepository
from app.infrastructure.storage import discard_file, promote_file
from app.utils import format_signing_timestamp, now_in_app_timezone

logger = logging.getLogger(__name__)

MENTION_FIELD = "mention"
_UNSIGNED_SUFFIX = "_unsigned"


def _promote_signed_pdf(staged: Path, destination: Path) -> Path:
    try:
        return promote_file(staged, destination)
    except OSError as exc:
        raise SigningFailedError(f"Could not store {destination.name}: {exc}") from exc


def _authorize(
    session: Session, record: DocumentRecord, presented_otp: object, settings: Settings
) -> None:
    reason: str | None = None
    if not record.is_signable:
        reason = f"document is {record.status}"
    elif settings.otp_single_use and record.status == DOCUMENT_STATUS_SIGNED:
        reason = "code already used"
    elif not validate_otp(
        record,
        presented_otp,
        now=now_in_app_timezone(),
        ttl_minutes=settings.otp_ttl_minutes,
    ):
        reason = "code mismatch or expired"

    if reason is None:
        return
    record_audit_event(
        session,
        document_id=record.id,
        operation=AUDIT_OPERATION_OTP_REJECTED,
        detail=reason,
    )
    logger.warning("Signing of document %s rejected: %s", record.id, reason)
    raise OtpMismatchError(f"One-time code rejected for document {record.id}")


def sign_document(
    session: Session,
    provider: DocumentProvider,
    *,
    document_id: str,
    presented_otp: object,
    signature: str,
    settings: Settings | None = None,
    locks: DocumentLockRegistry = document_locks,
) -> Path:
    """Validate the OTP, then embed, re-export and cryptographically sign.

    Nothing is mutated before the OTP check passes. Once it has, a failure
    leaves the provider copy partially updated; the record is then marked
    ``sign_failed`` with the failing stage and the error propagates.

    A ``signed`` record presented again only gets its PDF re-exported and
    re-stamped, since its signature image and mention are already in place.
    The new PDF is stamped under a staging name and replaces the final file
    only once signed, so a failed replay leaves the signed PDF and the
    record's status untouched.
    """

    settings = settings or get_settings()
    repository = DocumentRecordRepository(session)

    with locks.hold(document_id, timeout=settings.sign_lock_timeout_seconds):
        record = repository.get(document_id)
        if record is None:
            raise RecordNotFoundError(f"Document {document_id} not found")

        _authorize(session, record, presented_otp, settings)

        replay = record.status == DOCUMENT_STATUS_SIGNED
        signed_at = (record.signed_at if replay else None) or now_in_app_timezone()
        local_name = f"{record.name}_{record.id}"
        final_path = build_pdf_path(settings.documents_dir, local_name)
        staged_path: Path | None = None
        try:
            if not replay:
                embed_signature_image(
                    provider,
                    record.template_copy_id,
                    signature,
                    staging_dir=settings.documents_dir / "signatures",
                    width=settings.signature_image_width,
                    height=settings.signature_image_height,
                )
                mention = settings.signed_mention_template.format(
                    signed_at=format_signing_timestamp(signed_at)
                )
                substitute_placeholders(
                    provider, record.template_copy_id, {MENTION_FIELD: mention}
                )
            staged_path = export_pdf(
                provider,
                record.template_copy_id,
                f"{local_name}{_UNSIGNED_SUFFIX}",
                settings.documents_dir,
            )
            sign_pdf(
                staged_path,
                certificate_path=settings.p12_certificate,
                passphrase=settings.p12_password.get_secret_value(),
                reason=settings.signing_reason,
                bytes_reserved=settings.signature_bytes_reserved,
            )
            pdf_path = _promote_signed_pdf(staged_path, final_path)
        except DocumentWorkflowError as exc:
            if staged_path is not None:
                discard_file(staged_path)
            if not replay:
                record.status = DOCUMENT_STATUS_SIGN_FAILED
                record.failed_stage = exc.stage
                repository.update(record)
            record_audit_event(
                session,
                document_id=record.id,
                operation=AUDIT_OPERATION_SIGN_FAILED,
                detail=f"{exc.stage}: {exc.message}",
            )
            logger.error(
                "Signing of document %s failed at %s: %s", record.id, exc.stage, exc.message
            )
            raise

        record.status = DOCUMENT_STATUS_SIGNED
        record.failed_stage = None
        record.pdf_path = str(pdf_path)
        record.signed_at = signed_at
        repository.update(record)
        record_audit_event(
            session,
            document_id=record.id,
            operation=AUDIT_OPERATION_SIGNED,
            detail=f"{pdf_path.name} (re-stamped)" if replay else pdf_path.name,
        )
        logger.info("Document %s signed and stamped at %s", record.id, pdf_path)
        return pdf_path


__all__ = ["MENTION_FIELD", "sign_document"]
