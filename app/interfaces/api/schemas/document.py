"""Schemas for document generation and signing endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Markers filled during signing.
RESERVED_PLACEHOLDERS = ("signature", "mention")


class DocumentInformation(BaseModel):
    """Values substituted into the template; any extra field is a placeholder too."""

    model_config = ConfigDict(extra="allow")

    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    date: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _stringify_numbers(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _reject_reserved_placeholders(self) -> "DocumentInformation":
        reserved = sorted(set(self.model_extra or {}) & set(RESERVED_PLACEHOLDERS))
        if reserved:
            raise ValueError(f"Reserved placeholders cannot be supplied: {', '.join(reserved)}")
        return self

    def as_placeholders(self) -> dict[str, str]:
        values = self.model_dump(exclude_none=True)
        return {key: "" if value is None else str(value) for key, value in values.items()}


class GenerateDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_id: str = Field(..., alias="documentId", min_length=1)
    information: DocumentInformation


class GenerateDocumentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "ok"
    id: str
    name: str
    otp: int
    sign_url: str = Field(..., alias="signUrl")


class SignDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sms_code: int | str = Field(..., alias="smsCode")
    signature: str = Field(..., min_length=1)


class SignDocumentResponse(BaseModel):
    message: str = "ok"
    status: str


class DocumentRead(BaseModel):
    """Public view of a document record; never exposes the one-time code."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: str
    failed_stage: str | None
    created_at: datetime | None
    signed_at: datetime | None


__all__ = [
    "DocumentInformation",
    "DocumentRead",
    "GenerateDocumentRequest",
    "GenerateDocumentResponse",
    "SignDocumentRequest",
    "SignDocumentResponse",
]
