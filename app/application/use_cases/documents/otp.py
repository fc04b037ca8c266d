"""One-time codes gating the signing phase."""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta

from app.domain.entities import DocumentRecord

OTP_MIN = 100_000
OTP_MAX = 999_999


def generate_otp() -> int:
    """Return an unpredictable six-digit code."""

    return OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)


def normalize_otp(value: object) -> int | None:
    """Return ``value`` as a non-negative integer code, or ``None``.

    Codes arrive as JSON numbers or as strings typed into a form; both forms of
    the same digits normalize to the same integer.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    if isinstance(value, str):
        candidate = value.strip()
        if candidate.isascii() and candidate.isdigit():
            return int(candidate)
    return None


def is_otp_expired(
    record: DocumentRecord, *, now: datetime, ttl_minutes: int | None
) -> bool:
    if ttl_minutes is None or record.otp_issued_at is None:
        return False
    return now - record.otp_issued_at > timedelta(minutes=ttl_minutes)


def validate_otp(
    record: DocumentRecord,
    presented: object,
    *,
    now: datetime | None = None,
    ttl_minutes: int | None = None,
) -> bool:
    """Return whether ``presented`` unlocks the signing phase of ``record``."""

    expected = normalize_otp(record.otp)
    candidate = normalize_otp(presented)
    if expected is None or candidate is None:
        return False
    if now is not None and is_otp_expired(record, now=now, ttl_minutes=ttl_minutes):
        return False
    return hmac.compare_digest(str(expected).encode(), str(candidate).encode())


__all__ = [
    "OTP_MAX",
    "OTP_MIN",
    "generate_otp",
    "is_otp_expired",
    "normalize_otp",
    "validate_otp",
]
