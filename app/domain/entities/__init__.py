"""Domain entities exposed by the application."""

from .audit_log import (
    AUDIT_OPERATION_COPY_SWEPT,
    AUDIT_OPERATION_GENERATED,
    AUDIT_OPERATION_GENERATION_FAILED,
    AUDIT_OPERATION_OTP_REJECTED,
    AUDIT_OPERATION_SIGNED,
    AUDIT_OPERATION_SIGN_FAILED,
    AuditLog,
)
from .document_record import (
    DOCUMENT_STATUSES,
    DOCUMENT_STATUS_ABANDONED,
    DOCUMENT_STATUS_CREATED,
    DOCUMENT_STATUS_PENDING,
    DOCUMENT_STATUS_SIGNED,
    DOCUMENT_STATUS_SIGN_FAILED,
    SIGNABLE_STATUSES,
    DocumentRecord,
)

__all__ = [
    "AuditLog",
    "AUDIT_OPERATION_COPY_SWEPT",
    "AUDIT_OPERATION_GENERATED",
    "AUDIT_OPERATION_GENERATION_FAILED",
    "AUDIT_OPERATION_OTP_REJECTED",
    "AUDIT_OPERATION_SIGNED",
    "AUDIT_OPERATION_SIGN_FAILED",
    "DocumentRecord",
    "DOCUMENT_STATUSES",
    "DOCUMENT_STATUS_ABANDONED",
    "DOCUMENT_STATUS_CREATED",
    "DOCUMENT_STATUS_PENDING",
    "DOCUMENT_STATUS_SIGNED",
    "DOCUMENT_STATUS_SIGN_FAILED",
    "SIGNABLE_STATUSES",
]
