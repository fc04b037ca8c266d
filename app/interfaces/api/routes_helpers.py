"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from app.domain.exceptions import (
    DocumentBusyError,
    DocumentWorkflowError,
    OtpMismatchError,
    ProviderUnavailableError,
    RecordNotFoundError,
    TemplateNotFoundError,
)

# Ordered from most to least specific; the first match wins.
_STATUS_BY_ERROR: tuple[tuple[type[DocumentWorkflowError], int], ...] = (
    (OtpMismatchError, status.HTTP_401_UNAUTHORIZED),
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (TemplateNotFoundError, status.HTTP_404_NOT_FOUND),
    (DocumentBusyError, status.HTTP_409_CONFLICT),
    (ProviderUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def workflow_error_status(exc: DocumentWorkflowError) -> int:
    """Return the HTTP status code reported for ``exc``."""

    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: DocumentWorkflowError) -> HTTPException:
    """Convert a workflow error into an ``HTTPException`` naming the failed stage."""

    status_code = workflow_error_status(exc)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        # Rejections do not tell the caller why the code was refused.
        return HTTPException(status_code=status_code, detail="Invalid one-time code")
    return HTTPException(
        status_code=status_code,
        detail={
            "error": exc.__class__.__name__,
            "stage": exc.stage,
            "message": exc.message,
        },
    )


__all__ = ["to_http_exception", "workflow_error_status"]
