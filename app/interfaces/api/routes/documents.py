"""Routes driving document generation and signing."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.documents import (
    generate_document as generate_document_uc,
    get_document as get_document_uc,
    list_documents as list_documents_uc,
    sign_document as sign_document_uc,
)
from app.application.use_cases.documents.generate_document import build_sign_url
from app.config import Settings
from app.domain.document_provider import DocumentProvider
from app.domain.entities import DocumentRecord
from app.domain.exceptions import DocumentWorkflowError
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_app_settings, get_document_provider
from app.interfaces.api.routes_helpers import to_http_exception
from app.interfaces.api.schemas import (
    DocumentRead,
    GenerateDocumentRequest,
    GenerateDocumentResponse,
    SignDocumentRequest,
    SignDocumentResponse,
)

router = APIRouter(tags=["documents"])


def _document_to_read_model(record: DocumentRecord) -> DocumentRead:
    return DocumentRead.model_validate(record)


@router.post(
    "/generate-document",
    response_model=GenerateDocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_document(
    payload: GenerateDocumentRequest,
    db: Session = Depends(get_db),
    provider: DocumentProvider = Depends(get_document_provider),
    settings: Settings = Depends(get_app_settings),
) -> GenerateDocumentResponse:
    """Create a personalized copy of a template and return how to sign it."""

    try:
        record = generate_document_uc(
            db,
            provider,
            template_id=payload.template_id,
            information=payload.information.as_placeholders(),
            settings=settings,
        )
    except DocumentWorkflowError as exc:
        raise to_http_exception(exc) from exc
    return GenerateDocumentResponse(
        id=record.id,
        name=record.name,
        otp=record.otp,
        sign_url=build_sign_url(settings, record.id),
    )


@router.get("/sign/{document_id}", response_model=DocumentRead)
def read_document_for_signing(
    document_id: str,
    db: Session = Depends(get_db),
) -> DocumentRead:
    """Return the document a signer is about to sign."""

    try:
        record = get_document_uc(db, document_id)
    except DocumentWorkflowError as exc:
        raise to_http_exception(exc) from exc
    return _document_to_read_model(record)


@router.post("/sign/{document_id}", response_model=SignDocumentResponse)
def sign_document(
    document_id: str,
    payload: SignDocumentRequest,
    db: Session = Depends(get_db),
    provider: DocumentProvider = Depends(get_document_provider),
    settings: Settings = Depends(get_app_settings),
) -> SignDocumentResponse:
    """Check the one-time code, then embed the signature and stamp the PDF."""

    try:
        sign_document_uc(
            db,
            provider,
            document_id=document_id,
            presented_otp=payload.sms_code,
            signature=payload.signature,
            settings=settings,
        )
    except DocumentWorkflowError as exc:
        raise to_http_exception(exc) from exc
    return SignDocumentResponse(status="signed")


@router.get("/documents/", response_model=list[DocumentRead])
def list_documents(
    status_filter: str | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    db: Session = Depends(get_db),
) -> list[DocumentRead]:
    """Return document records so operators can spot partial failures."""

    try:
        records = list_documents_uc(db, status=status_filter, skip=skip, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_document_to_read_model(record) for record in records]


__all__ = ["router"]
