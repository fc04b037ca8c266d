"""Embedding of the handwritten signature image into the document copy."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from app.domain.document_provider import DocumentProvider
from app.domain.exceptions import ImageEmbedFailedError
from app.infrastructure.storage import build_staging_path, discard_file

logger = logging.getLogger(__name__)

SIGNATURE_MARKER = "{{ signature }}"

_DATA_URI_PREFIX = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,")


def decode_signature_image(signature: str) -> bytes:
    """Decode a base64 data URI into PNG bytes.

    The ``data:image/png;base64,`` prefix sent by signature pads is stripped
    before decoding. The payload is re-encoded as an RGBA PNG so the provider
    always receives the same format.
    """

    payload = _DATA_URI_PREFIX.sub("", signature.strip(), count=1)
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageEmbedFailedError("Signature is not valid base64 data") from exc
    if not raw:
        raise ImageEmbedFailedError("Signature image is empty")

    try:
        with Image.open(BytesIO(raw)) as image:
            image.load()
            buffer = BytesIO()
            image.convert("RGBA").save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageEmbedFailedError("Signature payload is not a readable image") from exc
    return buffer.getvalue()


def embed_signature_image(
    provider: DocumentProvider,
    document_id: str,
    signature: str,
    *,
    staging_dir: Path,
    width: int,
    height: int,
    marker: str = SIGNATURE_MARKER,
) -> None:
    """Replace the first ``marker`` in ``document_id`` with the signature image."""

    png_bytes = decode_signature_image(signature)
    try:
        staged = build_staging_path(staging_dir, ".png")
    except OSError as exc:
        raise ImageEmbedFailedError(f"Could not stage the signature image: {exc}") from exc
    try:
        try:
            staged.write_bytes(png_bytes)
        except OSError as exc:
            raise ImageEmbedFailedError(f"Could not stage the signature image: {exc}") from exc
        provider.replace_text_with_image(
            document_id, marker, staged, width=width, height=height
        )
    finally:
        discard_file(staged)
    logger.debug("Signature image embedded in %s", document_id)


__all__ = [
    "SIGNATURE_MARKER",
    "decode_signature_image",
    "embed_signature_image",
]
