"""ORM models used by the application infrastructure."""

from .audit_log import AuditLogModel
from .document_record import DocumentRecordModel

__all__ = [
    "AuditLogModel",
    "DocumentRecordModel",
]
