"""Tests for exporting provider documents to local PDFs."""

from __future__ import annotations

import pytest

from app.application.use_cases.documents.export_pdf import build_pdf_path, export_pdf
from app.domain.exceptions import ExportFailedError, ProviderUnavailableError


def test_build_pdf_path_sanitizes_the_name(tmp_path) -> None:
    path = build_pdf_path(tmp_path, "Contract de/Jane Doe")

    assert path == tmp_path / "Contract_de_Jane_Doe.pdf"


def test_export_writes_rendered_pdf(provider, template_id, tmp_path) -> None:
    copy_id = provider.copy_document(template_id, "copy")

    path = export_pdf(provider, copy_id, "Contract_Jane_Doe_1", tmp_path / "documents")

    assert path == tmp_path / "documents" / "Contract_Jane_Doe_1.pdf"
    content = path.read_bytes()
    assert content.startswith(b"%PDF-")
    assert b"Contract between ACME" in content


def test_export_is_idempotent(provider, template_id, tmp_path) -> None:
    copy_id = provider.copy_document(template_id, "copy")

    first = export_pdf(provider, copy_id, "same", tmp_path).read_bytes()
    second = export_pdf(provider, copy_id, "same", tmp_path).read_bytes()

    assert first == second
    assert sorted(p.name for p in tmp_path.iterdir()) == ["same.pdf"]


def test_failed_export_keeps_previous_file(provider, template_id, tmp_path) -> None:
    copy_id = provider.copy_document(template_id, "copy")
    path = export_pdf(provider, copy_id, "kept", tmp_path)
    previous = path.read_bytes()

    provider.failures["write_pdf"] = ProviderUnavailableError("timed out")
    with pytest.raises(ProviderUnavailableError):
        export_pdf(provider, copy_id, "kept", tmp_path)

    assert path.read_bytes() == previous
    assert sorted(p.name for p in tmp_path.iterdir()) == ["kept.pdf"]


def test_unwritable_directory_raises_export_failed(provider, template_id, tmp_path) -> None:
    copy_id = provider.copy_document(template_id, "copy")
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file")

    with pytest.raises(ExportFailedError):
        export_pdf(provider, copy_id, "doc", blocker)
