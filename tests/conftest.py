"""Shared fixtures for the document signing tests."""

from __future__ import annotations

import base64
import os
import tempfile
from datetime import datetime, timedelta, timezone
from io import BytesIO
from pathlib import Path

import pytest

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="docsign-tests-"))
TEST_DB_PATH = _TEST_ROOT / "test.db"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("CREDENTIALS_PATH", str(_TEST_ROOT / "credentials.json"))
os.environ.setdefault("P12_CERTIFICATE", str(_TEST_ROOT / "unused.p12"))
os.environ.setdefault("P12_PASSWORD", "unused")
os.environ.setdefault("DOCUMENTS_DIR", str(_TEST_ROOT / "documents"))

from cryptography import x509  # noqa: E402
from cryptography.hazmat.primitives import hashes, serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402
from cryptography.hazmat.primitives.serialization import pkcs12  # noqa: E402
from cryptography.x509.oid import NameOID  # noqa: E402
from PIL import Image  # noqa: E402
from reportlab.pdfgen import canvas  # noqa: E402

from app.config import Settings  # noqa: E402
from app.domain.exceptions import (  # noqa: E402
    DocumentWorkflowError,
    ImageEmbedFailedError,
    TemplateNotFoundError,
)

P12_PASSWORD = "correct horse"

TEMPLATE_ID = "template-contract"
TEMPLATE_TITLE = "Contract"
TEMPLATE_TEXT = (
    "Contract between ACME and {{ firstname }} {{ lastname }}\n"
    "Signed on {{ date }}\n"
    "{{ signature }}\n"
    "{{ mention }}"
)
SIGNATURE_IMAGE_TEXT = "[signature image]"


class FakeDocumentProvider:
    """In-memory provider rendering documents as uncompressed PDFs.

    ``failures`` maps a method name to the exception raised by its next
    calls. Every mutating call is appended to ``mutations``.
    """

    def __init__(self, templates: dict[str, tuple[str, str]] | None = None) -> None:
        self.templates = dict(templates or {TEMPLATE_ID: (TEMPLATE_TITLE, TEMPLATE_TEXT)})
        self.documents: dict[str, dict[str, str]] = {}
        self.mutations: list[tuple[str, str]] = []
        self.failures: dict[str, DocumentWorkflowError] = {}
        self.embedded_images: list[tuple[Path, bytes, int, int]] = []
        self.deleted: list[str] = []
        self.closed = False
        self._counter = 0

    def _maybe_fail(self, method: str) -> None:
        error = self.failures.get(method)
        if error is not None:
            raise error

    def get_document_title(self, document_id: str) -> str:
        self._maybe_fail("get_document_title")
        if document_id in self.templates:
            return self.templates[document_id][0]
        if document_id in self.documents:
            return self.documents[document_id]["title"]
        raise TemplateNotFoundError(f"Provider document not found: {document_id}")

    def copy_document(self, document_id: str, name: str) -> str:
        self._maybe_fail("copy_document")
        if document_id not in self.templates:
            raise TemplateNotFoundError(f"Provider document not found: {document_id}")
        self._counter += 1
        copy_id = f"copy-{self._counter}"
        self.documents[copy_id] = {"title": name, "text": self.templates[document_id][1]}
        self.mutations.append(("copy_document", copy_id))
        return copy_id

    def batch_update(self, document_id, requests) -> None:
        self._maybe_fail("batch_update")
        text = self.documents[document_id]["text"]
        for request in requests:
            replace = request["replaceAllText"]
            text = text.replace(replace["containsText"]["text"], replace["replaceText"])
        self.documents[document_id]["text"] = text
        self.mutations.append(("batch_update", document_id))

    def replace_text_with_image(self, document_id, marker, image_path, *, width, height) -> None:
        self._maybe_fail("replace_text_with_image")
        text = self.documents[document_id]["text"]
        if marker not in text:
            raise ImageEmbedFailedError(f"Marker {marker!r} not found in document")
        self.embedded_images.append((Path(image_path), Path(image_path).read_bytes(), width, height))
        self.documents[document_id]["text"] = text.replace(marker, SIGNATURE_IMAGE_TEXT, 1)
        self.mutations.append(("replace_text_with_image", document_id))

    def write_pdf(self, document_id, handle) -> None:
        self._maybe_fail("write_pdf")
        handle.write(render_pdf(self.documents[document_id]["text"]))

    def delete_document(self, document_id: str) -> None:
        self._maybe_fail("delete_document")
        self.documents.pop(document_id, None)
        self.deleted.append(document_id)

    def close(self) -> None:
        self.closed = True

    def text_of(self, document_id: str) -> str:
        return self.documents[document_id]["text"]


def render_pdf(text: str) -> bytes:
    """Render ``text`` line by line into a deterministic, uncompressed PDF."""

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, invariant=1, pageCompression=0)
    y = 800
    for line in text.splitlines():
        pdf.drawString(72, y, line)
        y -= 20
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def build_pkcs12_bundle(password: str) -> bytes:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Signer")])
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=True,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .sign(key, hashes.SHA256())
    )
    return pkcs12.serialize_key_and_certificates(
        b"test-signer",
        key,
        certificate,
        None,
        serialization.BestAvailableEncryption(password.encode("utf-8")),
    )


@pytest.fixture(scope="session")
def p12_bundle(tmp_path_factory) -> Path:
    path = tmp_path_factory.mktemp("certificates") / "signer.p12"
    path.write_bytes(build_pkcs12_bundle(P12_PASSWORD))
    return path


@pytest.fixture()
def settings(tmp_path, p12_bundle) -> Settings:
    return Settings(
        credentials_path=tmp_path / "credentials.json",
        p12_certificate=p12_bundle,
        p12_password=P12_PASSWORD,
        documents_dir=tmp_path / "documents",
        public_base_url="https://sign.example.com/",
    )


@pytest.fixture()
def provider() -> FakeDocumentProvider:
    return FakeDocumentProvider()


@pytest.fixture()
def signature_data_uri() -> str:
    buffer = BytesIO()
    Image.new("RGBA", (40, 20), (0, 0, 128, 255)).save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    from app.infrastructure import database

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def template_id() -> str:
    return TEMPLATE_ID


@pytest.fixture()
def p12_password() -> str:
    return P12_PASSWORD


@pytest.fixture()
def unsigned_pdf(tmp_path) -> Path:
    path = tmp_path / "unsigned.pdf"
    path.write_bytes(render_pdf("Contract between ACME and Jane Doe\nSigned on 2024-05-01"))
    return path
