"""SQLAlchemy model for audit records of document workflow events."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.infrastructure.database import Base
from app.utils import ensure_app_naive_datetime, now_in_app_timezone


def _now_naive():
    return ensure_app_naive_datetime(now_in_app_timezone())


class AuditLogModel(Base):
    """Database representation of audit events."""

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(
        String(32),
        ForeignKey("document_record.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    operation = Column(String(50), nullable=False)
    detail = Column(String(1024), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=_now_naive)


__all__ = ["AuditLogModel"]
