"""Document generation and signing use cases."""

from .export_pdf import export_pdf
from .generate_document import generate_document
from .get_document import get_document, list_documents
from .locks import DocumentLockRegistry, document_locks
from .otp import generate_otp, normalize_otp, validate_otp
from .placeholders import substitute_placeholders
from .sign_document import sign_document
from .signature_image import embed_signature_image
from .sweep_abandoned_documents import SweepReport, sweep_abandoned_documents

__all__ = [
    "DocumentLockRegistry",
    "SweepReport",
    "document_locks",
    "embed_signature_image",
    "export_pdf",
    "generate_document",
    "generate_otp",
    "get_document",
    "list_documents",
    "normalize_otp",
    "sign_document",
    "substitute_placeholders",
    "sweep_abandoned_documents",
    "validate_otp",
]
