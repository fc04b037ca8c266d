"""HTTP tests for the document generation and signing endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.domain.exceptions import ProviderUnavailableError, SubstitutionFailedError


@pytest.fixture()
def client(db_session, provider, settings):
    """Return a test client whose application uses the fake provider."""

    from main import create_app

    app = create_app(document_provider=provider, settings=settings)
    with TestClient(app) as test_client:
        yield test_client


def _generate(client: TestClient, template_id: str) -> dict:
    response = client.post(
        "/generate-document",
        json={
            "documentId": template_id,
            "information": {"firstname": "Jane", "lastname": "Doe", "date": "2024-05-01", "amount": 1200},
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_generate_returns_otp_and_sign_link(client, provider, template_id) -> None:
    body = _generate(client, template_id)

    assert body["message"] == "ok"
    assert body["name"] == "Contract_Jane_Doe"
    assert 100000 <= body["otp"] <= 999999
    assert body["signUrl"] == f"https://sign.example.com/sign/{body['id']}"


def test_generate_validates_information(client, template_id) -> None:
    response = client.post(
        "/generate-document",
        json={"documentId": template_id, "information": {"firstname": "Jane"}},
    )

    assert response.status_code == 422


@pytest.mark.parametrize("reserved", ["signature", "mention"])
def test_generate_rejects_reserved_placeholders(client, provider, template_id, reserved) -> None:
    response = client.post(
        "/generate-document",
        json={
            "documentId": template_id,
            "information": {"firstname": "Jane", "lastname": "Doe", reserved: "forged"},
        },
    )

    assert response.status_code == 422
    assert reserved in response.text
    assert provider.mutations == []


def test_generate_unknown_template_is_404(client) -> None:
    response = client.post(
        "/generate-document",
        json={"documentId": "missing", "information": {"firstname": "Jane", "lastname": "Doe"}},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["stage"] == "template_copy"


def test_generate_failure_reports_stage(client, provider, template_id) -> None:
    provider.failures["batch_update"] = SubstitutionFailedError("rejected")

    response = client.post(
        "/generate-document",
        json={"documentId": template_id, "information": {"firstname": "Jane", "lastname": "Doe"}},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == {
        "error": "SubstitutionFailedError",
        "stage": "substitution",
        "message": "rejected",
    }
    listed = client.get("/documents/", params={"status": "abandoned"}).json()
    assert [item["failed_stage"] for item in listed] == ["substitution"]


def test_provider_outage_is_503(client, provider, template_id) -> None:
    provider.failures["copy_document"] = ProviderUnavailableError("timed out")

    response = client.post(
        "/generate-document",
        json={"documentId": template_id, "information": {"firstname": "Jane", "lastname": "Doe"}},
    )

    assert response.status_code == 503


def test_sign_flow_over_http(client, provider, template_id, signature_data_uri) -> None:
    generated = _generate(client, template_id)
    document_id = generated["id"]

    preview = client.get(f"/sign/{document_id}")
    assert preview.status_code == 200
    assert preview.json()["status"] == "created"
    assert "otp" not in preview.json()

    response = client.post(
        f"/sign/{document_id}",
        json={"smsCode": str(generated["otp"]), "signature": signature_data_uri},
    )
    assert response.status_code == 200, response.text
    assert response.json() == {"message": "ok", "status": "signed"}

    assert client.get(f"/sign/{document_id}").json()["status"] == "signed"
    audit = client.get("/audit-logs/", params={"document_id": document_id}).json()
    assert [entry["operation"] for entry in audit] == ["generated", "signed"]
    entry = client.get(f"/audit-logs/{audit[0]['id']}")
    assert entry.status_code == 200
    assert entry.json()["document_id"] == document_id


def test_wrong_code_is_401_without_details(client, provider, template_id, signature_data_uri) -> None:
    generated = _generate(client, template_id)
    wrong = 100000 if generated["otp"] != 100000 else 100001
    mutations_before = list(provider.mutations)

    response = client.post(
        f"/sign/{generated['id']}",
        json={"smsCode": wrong, "signature": signature_data_uri},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid one-time code"}
    assert provider.mutations == mutations_before


def test_unknown_document_is_404(client, signature_data_uri) -> None:
    assert client.get("/sign/unknown").status_code == 404

    response = client.post(
        "/sign/unknown", json={"smsCode": 123456, "signature": signature_data_uri}
    )
    assert response.status_code == 404


def test_invalid_signature_payload_marks_sign_failed(client, template_id) -> None:
    generated = _generate(client, template_id)

    response = client.post(
        f"/sign/{generated['id']}",
        json={"smsCode": generated["otp"], "signature": "data:image/png;base64,????"},
    )

    assert response.status_code == 500
    assert response.json()["detail"]["stage"] == "image_embed"
    assert client.get(f"/sign/{generated['id']}").json()["status"] == "sign_failed"


def test_list_documents_rejects_unknown_status(client) -> None:
    response = client.get("/documents/", params={"status": "archived"})

    assert response.status_code == 400


def test_missing_audit_entry_is_404(client) -> None:
    assert client.get("/audit-logs/9999").status_code == 404


def test_provider_is_closed_on_shutdown(db_session, provider, settings) -> None:
    from main import create_app

    with TestClient(create_app(document_provider=provider, settings=settings)):
        assert not provider.closed

    assert provider.closed
