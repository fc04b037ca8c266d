"""Tests for decoding and embedding the handwritten signature."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image

from app.application.use_cases.documents.signature_image import (
    SIGNATURE_MARKER,
    decode_signature_image,
    embed_signature_image,
)
from app.domain.exceptions import STAGE_IMAGE_EMBED, ImageEmbedFailedError

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_decode_strips_data_uri_prefix(signature_data_uri) -> None:
    png = decode_signature_image(signature_data_uri)

    assert png.startswith(PNG_MAGIC)
    with Image.open(BytesIO(png)) as image:
        assert image.size == (40, 20)
        assert image.mode == "RGBA"


def test_decode_accepts_bare_base64_and_other_formats() -> None:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (255, 255, 255)).save(buffer, format="JPEG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")

    assert decode_signature_image(encoded).startswith(PNG_MAGIC)
    assert decode_signature_image(f"data:image/jpeg;base64,{encoded}").startswith(PNG_MAGIC)


@pytest.mark.parametrize(
    "payload",
    [
        "data:image/png;base64,not base64!",
        "data:image/png;base64,",
        "data:image/png;base64," + base64.b64encode(b"plain text").decode("ascii"),
    ],
)
def test_decode_rejects_unusable_payloads(payload) -> None:
    with pytest.raises(ImageEmbedFailedError) as exc_info:
        decode_signature_image(payload)

    assert exc_info.value.stage == STAGE_IMAGE_EMBED


def test_embed_replaces_marker_and_removes_staged_file(
    provider, template_id, signature_data_uri, tmp_path
) -> None:
    copy_id = provider.copy_document(template_id, "copy")
    staging_dir = tmp_path / "signatures"

    embed_signature_image(
        provider, copy_id, signature_data_uri, staging_dir=staging_dir, width=150, height=150
    )

    assert SIGNATURE_MARKER not in provider.text_of(copy_id)
    staged_path, staged_bytes, width, height = provider.embedded_images[0]
    assert staged_bytes.startswith(PNG_MAGIC)
    assert (width, height) == (150, 150)
    assert staged_path.parent == staging_dir
    assert not staged_path.exists()
    assert list(staging_dir.iterdir()) == []


def test_embed_fails_when_marker_is_absent(provider, template_id, signature_data_uri, tmp_path) -> None:
    copy_id = provider.copy_document(template_id, "copy")
    provider.documents[copy_id]["text"] = "no marker here"
    staging_dir = tmp_path / "signatures"

    with pytest.raises(ImageEmbedFailedError):
        embed_signature_image(
            provider, copy_id, signature_data_uri, staging_dir=staging_dir, width=150, height=150
        )

    assert list(staging_dir.iterdir()) == []


def test_unusable_staging_directory_is_an_embed_error(
    provider, template_id, signature_data_uri, tmp_path
) -> None:
    copy_id = provider.copy_document(template_id, "copy")
    staging_dir = tmp_path / "signatures"
    staging_dir.write_text("not a directory")

    with pytest.raises(ImageEmbedFailedError) as exc_info:
        embed_signature_image(
            provider, copy_id, signature_data_uri, staging_dir=staging_dir, width=150, height=150
        )

    assert exc_info.value.stage == STAGE_IMAGE_EMBED
    assert SIGNATURE_MARKER in provider.text_of(copy_id)
