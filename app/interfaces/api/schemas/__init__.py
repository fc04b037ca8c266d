from .audit_log import AuditLogRead
from .document import (
    DocumentInformation,
    DocumentRead,
    GenerateDocumentRequest,
    GenerateDocumentResponse,
    SignDocumentRequest,
    SignDocumentResponse,
)

__all__ = [
    "AuditLogRead",
    "DocumentInformation",
    "DocumentRead",
    "GenerateDocumentRequest",
    "GenerateDocumentResponse",
    "SignDocumentRequest",
    "SignDocumentResponse",
]
