"""Repository implementations for infrastructure layer."""

from .audit_log_repository import AuditLogRepository
from .document_record_repository import DocumentRecordRepository

__all__ = [
    "AuditLogRepository",
    "DocumentRecordRepository",
]
