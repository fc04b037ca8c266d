"""Errors raised by the document signing workflow.

Every error carries the ``stage`` of the workflow that failed so operators can
tell how far a document went before the failure. Messages never include
credential material.
"""

from __future__ import annotations

STAGE_TEMPLATE_COPY = "template_copy"
STAGE_SUBSTITUTION = "substitution"
STAGE_IMAGE_EMBED = "image_embed"
STAGE_EXPORT = "export"
STAGE_CRYPTO_SIGN = "crypto_sign"
STAGE_OTP = "otp"
STAGE_RECORD_LOOKUP = "record_lookup"
STAGE_RECORD_LOCK = "record_lock"
STAGE_CLEANUP = "cleanup"


class DocumentWorkflowError(Exception):
    """Base class for failures of the generation and signing workflow."""

    default_stage = "workflow"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage


class TemplateNotFoundError(DocumentWorkflowError):
    default_stage = STAGE_TEMPLATE_COPY


class ProviderUnavailableError(DocumentWorkflowError):
    """The document provider could not be reached or timed out."""


class SubstitutionFailedError(DocumentWorkflowError):
    default_stage = STAGE_SUBSTITUTION


class ImageEmbedFailedError(DocumentWorkflowError):
    default_stage = STAGE_IMAGE_EMBED


class ExportFailedError(DocumentWorkflowError):
    default_stage = STAGE_EXPORT


class InvalidPassphraseError(DocumentWorkflowError):
    """The certificate bundle could not be unlocked."""

    default_stage = STAGE_CRYPTO_SIGN


class PlaceholderInsertFailedError(DocumentWorkflowError):
    """The signature field could not be reserved in the PDF."""

    default_stage = STAGE_CRYPTO_SIGN


class SigningFailedError(DocumentWorkflowError):
    default_stage = STAGE_CRYPTO_SIGN


class OtpMismatchError(DocumentWorkflowError):
    """The presented one-time code does not authorize signing.

    This is the one expected rejection of the workflow and maps to an
    authorization failure rather than a system fault.
    """

    default_stage = STAGE_OTP


class RecordNotFoundError(DocumentWorkflowError):
    default_stage = STAGE_RECORD_LOOKUP


class DocumentBusyError(DocumentWorkflowError):
    """Another signing request currently holds the document."""

    default_stage = STAGE_RECORD_LOCK


__all__ = [
    "DocumentBusyError",
    "DocumentWorkflowError",
    "ExportFailedError",
    "ImageEmbedFailedError",
    "InvalidPassphraseError",
    "OtpMismatchError",
    "PlaceholderInsertFailedError",
    "ProviderUnavailableError",
    "RecordNotFoundError",
    "SigningFailedError",
    "SubstitutionFailedError",
    "TemplateNotFoundError",
    "STAGE_CLEANUP",
    "STAGE_CRYPTO_SIGN",
    "STAGE_EXPORT",
    "STAGE_IMAGE_EMBED",
    "STAGE_OTP",
    "STAGE_RECORD_LOCK",
    "STAGE_RECORD_LOOKUP",
    "STAGE_SUBSTITUTION",
    "STAGE_TEMPLATE_COPY",
]
