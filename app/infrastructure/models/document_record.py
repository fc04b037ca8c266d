"""SQLAlchemy model for document records."""

from sqlalchemy import Column, DateTime, Integer, String

from app.infrastructure.database import Base
from app.utils import ensure_app_naive_datetime, now_in_app_timezone


def _now_naive():
    return ensure_app_naive_datetime(now_in_app_timezone())


class DocumentRecordModel(Base):
    """Database representation of a generated document and its signing state."""

    __tablename__ = "document_record"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    template_copy_id = Column(String(255), nullable=True)
    otp = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, index=True)
    pdf_path = Column(String(1024), nullable=True)
    failed_stage = Column(String(50), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=_now_naive)
    otp_issued_at = Column(DateTime(), nullable=True)
    signed_at = Column(DateTime(), nullable=True)


__all__ = ["DocumentRecordModel"]
