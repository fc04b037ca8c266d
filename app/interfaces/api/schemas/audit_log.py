"""Schemas for audit log endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditLogRead(BaseModel):
    """Representation of an audit log entry returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: str
    operation: str
    detail: str | None
    created_at: datetime | None


__all__ = ["AuditLogRead"]
