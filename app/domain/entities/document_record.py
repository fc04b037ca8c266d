"""Domain entity representing a generated document awaiting or carrying a signature."""

from dataclasses import dataclass
from datetime import datetime

DOCUMENT_STATUS_PENDING = "pending"
DOCUMENT_STATUS_ABANDONED = "abandoned"
DOCUMENT_STATUS_CREATED = "created"
DOCUMENT_STATUS_SIGN_FAILED = "sign_failed"
DOCUMENT_STATUS_SIGNED = "signed"

DOCUMENT_STATUSES = (
    DOCUMENT_STATUS_PENDING,
    DOCUMENT_STATUS_ABANDONED,
    DOCUMENT_STATUS_CREATED,
    DOCUMENT_STATUS_SIGN_FAILED,
    DOCUMENT_STATUS_SIGNED,
)

# Statuses from which the signing phase may start once the OTP is valid.
SIGNABLE_STATUSES = (
    DOCUMENT_STATUS_CREATED,
    DOCUMENT_STATUS_SIGN_FAILED,
    DOCUMENT_STATUS_SIGNED,
)


@dataclass
class DocumentRecord:
    """Workflow state linking a signer to its provider-side document copy."""

    id: str
    name: str
    template_copy_id: str | None
    otp: int | None
    status: str
    pdf_path: str | None
    failed_stage: str | None
    created_at: datetime | None
    otp_issued_at: datetime | None
    signed_at: datetime | None

    @property
    def is_signable(self) -> bool:
        return self.status in SIGNABLE_STATUSES


__all__ = [
    "DocumentRecord",
    "DOCUMENT_STATUSES",
    "DOCUMENT_STATUS_ABANDONED",
    "DOCUMENT_STATUS_CREATED",
    "DOCUMENT_STATUS_PENDING",
    "DOCUMENT_STATUS_SIGNED",
    "DOCUMENT_STATUS_SIGN_FAILED",
    "SIGNABLE_STATUSES",
]
