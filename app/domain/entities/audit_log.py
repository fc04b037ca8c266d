"""Domain entity representing an audit entry for document workflow events."""

from dataclasses import dataclass
from datetime import datetime

AUDIT_OPERATION_GENERATED = "generated"
AUDIT_OPERATION_GENERATION_FAILED = "generation_failed"
AUDIT_OPERATION_OTP_REJECTED = "otp_rejected"
AUDIT_OPERATION_SIGNED = "signed"
AUDIT_OPERATION_SIGN_FAILED = "sign_failed"
AUDIT_OPERATION_COPY_SWEPT = "copy_swept"


@dataclass
class AuditLog:
    """Captured information about a transition of a document record."""

    id: int | None
    document_id: str
    operation: str
    detail: str | None
    created_at: datetime | None


__all__ = [
    "AuditLog",
    "AUDIT_OPERATION_COPY_SWEPT",
    "AUDIT_OPERATION_GENERATED",
    "AUDIT_OPERATION_GENERATION_FAILED",
    "AUDIT_OPERATION_OTP_REJECTED",
    "AUDIT_OPERATION_SIGNED",
    "AUDIT_OPERATION_SIGN_FAILED",
]
