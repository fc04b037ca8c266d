"""Certificate-based digital signatures for exported PDFs using pyHanko."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from pyhanko.pdf_utils.incremental_writer import IncrementalPdfFileWriter
from pyhanko.pdf_utils.misc import PdfError
from pyhanko.sign import fields, signers
from pyhanko.sign.general import SigningError

from app.domain.exceptions import (
    InvalidPassphraseError,
    PlaceholderInsertFailedError,
    SigningFailedError,
)
from app.infrastructure.storage import write_atomically

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE_FIELD = "Signature1"


def load_pkcs12_signer(
    certificate_path: Path, passphrase: str | bytes | None
) -> signers.SimpleSigner:
    """Unlock the PKCS#12 bundle at ``certificate_path``.

    Raises :class:`InvalidPassphraseError` when the bundle cannot be read or
    decrypted. The passphrase is never included in messages.
    """

    if not certificate_path.is_file():
        raise InvalidPassphraseError(
            f"Certificate bundle {certificate_path.name} is not readable"
        )
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")

    try:
        signer = signers.SimpleSigner.load_pkcs12(
            str(certificate_path), passphrase=passphrase or None
        )
    except (ValueError, TypeError) as exc:
        raise InvalidPassphraseError(
            f"Certificate bundle {certificate_path.name} could not be unlocked"
        ) from exc
    if signer is None:
        raise InvalidPassphraseError(
            f"Certificate bundle {certificate_path.name} could not be unlocked"
        )
    return signer


def _reserve_signature_field(pdf_bytes: bytes, field_name: str) -> IncrementalPdfFileWriter:
    try:
        writer = IncrementalPdfFileWriter(BytesIO(pdf_bytes))
        fields.append_signature_field(
            writer, sig_field_spec=fields.SigFieldSpec(sig_field_name=field_name)
        )
    except (PdfError, ValueError, KeyError, IndexError, TypeError) as exc:
        raise PlaceholderInsertFailedError(
            f"Could not reserve signature field {field_name!r}: {exc}"
        ) from exc
    return writer


def sign_pdf(
    pdf_path: Path,
    *,
    certificate_path: Path,
    passphrase: str | bytes | None,
    reason: str,
    bytes_reserved: int | None = None,
    field_name: str = DEFAULT_SIGNATURE_FIELD,
) -> Path:
    """Embed a digital signature into ``pdf_path`` and overwrite it in place.

    The PDF first receives an empty signature field, then pyHanko computes the
    CMS signature over the byte ranges around the reserved ``/Contents`` slot.
    When ``bytes_reserved`` is ``None`` the slot is sized from the actual
    certificate; an explicit value too small for the signature fails instead
    of truncating. ``pdf_path`` is only replaced once signing succeeded.
    """

    signer = load_pkcs12_signer(certificate_path, passphrase)

    try:
        pdf_bytes = pdf_path.read_bytes()
    except OSError as exc:
        raise PlaceholderInsertFailedError(f"Could not read {pdf_path.name}: {exc}") from exc

    writer = _reserve_signature_field(pdf_bytes, field_name)

    output = BytesIO()
    signature_meta = signers.PdfSignatureMetadata(field_name=field_name, reason=reason)
    try:
        signers.sign_pdf(
            writer,
            signature_meta,
            signer=signer,
            bytes_reserved=bytes_reserved,
            output=output,
        )
    except (SigningError, PdfError, ValueError) as exc:
        raise SigningFailedError(f"Signing {pdf_path.name} failed: {exc}") from exc

    signed_bytes = output.getvalue()
    try:
        write_atomically(pdf_path, lambda handle: handle.write(signed_bytes))
    except OSError as exc:
        raise SigningFailedError(f"Could not write signed {pdf_path.name}: {exc}") from exc
    logger.info("Stamp added to document %s", pdf_path.name)
    return pdf_path


__all__ = ["DEFAULT_SIGNATURE_FIELD", "load_pkcs12_signer", "sign_pdf"]
