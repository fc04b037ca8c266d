"""Google Docs and Google Drive implementation of the document provider."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, MediaFileUpload, MediaIoBaseDownload

from app.domain.exceptions import (
    STAGE_CLEANUP,
    STAGE_EXPORT,
    STAGE_IMAGE_EMBED,
    STAGE_SUBSTITUTION,
    STAGE_TEMPLATE_COPY,
    DocumentWorkflowError,
    ExportFailedError,
    ImageEmbedFailedError,
    ProviderUnavailableError,
    SubstitutionFailedError,
    TemplateNotFoundError,
)

logger = logging.getLogger(__name__)

SCOPES = (
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive",
)
PDF_MIME_TYPE = "application/pdf"
_DOWNLOAD_CHUNK_SIZE = 1024 * 1024
_RETRYABLE_STATUSES = {408, 429, 500, 502, 503, 504}


def _status_of(exc: HttpError) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None and exc.resp is not None:
        status = exc.resp.status
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


@contextmanager
def translate_provider_errors(
    stage: str,
    error_cls: type[DocumentWorkflowError],
    *,
    not_found_cls: type[DocumentWorkflowError] | None = None,
) -> Iterator[None]:
    """Convert Google client failures raised inside the block into workflow errors."""

    try:
        yield
    except DocumentWorkflowError:
        raise
    except HttpError as exc:
        status = _status_of(exc)
        reason = exc.reason if hasattr(exc, "reason") else str(exc)
        if status == 404 and not_found_cls is not None:
            raise not_found_cls(f"Provider document not found: {reason}", stage=stage) from exc
        if status in _RETRYABLE_STATUSES:
            raise ProviderUnavailableError(
                f"Provider answered {status}: {reason}", stage=stage
            ) from exc
        raise error_cls(f"Provider rejected the request ({status}): {reason}", stage=stage) from exc
    except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as exc:
        raise ProviderUnavailableError(
            f"Provider unreachable: {exc.__class__.__name__}: {exc}", stage=stage
        ) from exc


def _iter_paragraphs(content: Sequence[Mapping[str, Any]]) -> Iterator[Mapping[str, Any]]:
    for element in content:
        if "paragraph" in element:
            yield element["paragraph"]
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    yield from _iter_paragraphs(cell.get("content", []))
        elif "tableOfContents" in element:
            yield from _iter_paragraphs(element["tableOfContents"].get("content", []))


def utf16_length(text: str) -> int:
    """Return the length of ``text`` in UTF-16 code units, the unit of Docs indexes."""

    return len(text.encode("utf-16-le")) // 2


def find_text_index(document: Mapping[str, Any], text: str) -> int | None:
    """Return the document index where ``text`` first starts, if present.

    Paragraph elements are stitched together so a marker split across text
    runs is still found. Non-text elements keep their index width and offsets
    are counted in UTF-16 code units, as Docs indexes are.
    """

    for paragraph in _iter_paragraphs(document.get("body", {}).get("content", [])):
        elements = paragraph.get("elements", [])
        if not elements:
            continue
        start = elements[0].get("startIndex", 0)
        pieces: list[str] = []
        for element in elements:
            text_run = element.get("textRun")
            if text_run is not None:
                pieces.append(text_run.get("content", ""))
            else:
                width = element.get("endIndex", 0) - element.get("startIndex", 0)
                pieces.append("\x00" * max(width, 0))
        joined = "".join(pieces)
        offset = joined.find(text)
        if offset >= 0:
            return start + utf16_length(joined[:offset])
    return None


class GoogleDocumentProvider:
    """Document provider backed by the Docs v1 and Drive v3 APIs.

    The client is built once at startup and shared across requests. Each
    request gets its own ``httplib2.Http`` because those objects are not
    thread safe, and every one of them carries the configured timeout.
    """

    def __init__(self, docs_service: Any, drive_service: Any) -> None:
        self._docs = docs_service
        self._drive = drive_service

    @classmethod
    def from_service_account_file(
        cls, credentials_path: Path, *, timeout: float
    ) -> "GoogleDocumentProvider":
        """Authorize with a service-account key file and build both API clients."""

        credentials = service_account.Credentials.from_service_account_file(
            str(credentials_path), scopes=list(SCOPES)
        )

        def build_request(http, *args, **kwargs):
            authorized = google_auth_httplib2.AuthorizedHttp(
                credentials, http=httplib2.Http(timeout=timeout)
            )
            return HttpRequest(authorized, *args, **kwargs)

        authorized_http = google_auth_httplib2.AuthorizedHttp(
            credentials, http=httplib2.Http(timeout=timeout)
        )
        docs = build(
            "docs",
            "v1",
            http=authorized_http,
            requestBuilder=build_request,
            cache_discovery=False,
        )
        drive = build(
            "drive",
            "v3",
            http=authorized_http,
            requestBuilder=build_request,
            cache_discovery=False,
        )
        logger.info("Google Docs/Drive clients authorized for %s", credentials.service_account_email)
        return cls(docs, drive)

    def get_document_title(self, document_id: str) -> str:
        with translate_provider_errors(
            STAGE_TEMPLATE_COPY, TemplateNotFoundError, not_found_cls=TemplateNotFoundError
        ):
            document = self._docs.documents().get(documentId=document_id).execute()
        return document["title"]

    def copy_document(self, document_id: str, name: str) -> str:
        with translate_provider_errors(
            STAGE_TEMPLATE_COPY, TemplateNotFoundError, not_found_cls=TemplateNotFoundError
        ):
            copy = (
                self._drive.files()
                .copy(fileId=document_id, body={"name": name}, fields="id")
                .execute()
            )
        return copy["id"]

    def batch_update(
        self, document_id: str, requests: Sequence[Mapping[str, Any]]
    ) -> None:
        with translate_provider_errors(STAGE_SUBSTITUTION, SubstitutionFailedError):
            self._docs.documents().batchUpdate(
                documentId=document_id, body={"requests": list(requests)}
            ).execute()

    def replace_text_with_image(
        self,
        document_id: str,
        marker: str,
        image_path: Path,
        *,
        width: int,
        height: int,
    ) -> None:
        """Upload the image to Drive, swap it in for ``marker``, then delete the upload.

        The Docs API only inserts images from a URI, so the image is shared
        publicly for the duration of the call.
        """

        with translate_provider_errors(STAGE_IMAGE_EMBED, ImageEmbedFailedError):
            document = self._docs.documents().get(documentId=document_id).execute()
            index = find_text_index(document, marker)
            if index is None:
                raise ImageEmbedFailedError(f"Marker {marker!r} not found in document")

            upload = (
                self._drive.files()
                .create(
                    body={"name": image_path.name},
                    media_body=MediaFileUpload(str(image_path), mimetype="image/png"),
                    fields="id",
                )
                .execute()
            )
            image_id = upload["id"]
            try:
                self._drive.permissions().create(
                    fileId=image_id, body={"type": "anyone", "role": "reader"}
                ).execute()
                requests = [
                    {
                        "deleteContentRange": {
                            "range": {
                                "startIndex": index,
                                "endIndex": index + utf16_length(marker),
                            }
                        }
                    },
                    {
                        "insertInlineImage": {
                            "location": {"index": index},
                            "uri": f"https://drive.google.com/uc?export=view&id={image_id}",
                            "objectSize": {
                                "width": {"magnitude": width, "unit": "PT"},
                                "height": {"magnitude": height, "unit": "PT"},
                            },
                        }
                    },
                ]
                self._docs.documents().batchUpdate(
                    documentId=document_id, body={"requests": requests}
                ).execute()
            finally:
                self._delete_quietly(image_id)

    def write_pdf(self, document_id: str, handle: BinaryIO) -> None:
        with translate_provider_errors(STAGE_EXPORT, ExportFailedError):
            request = self._drive.files().export_media(
                fileId=document_id, mimeType=PDF_MIME_TYPE
            )
            downloader = MediaIoBaseDownload(handle, request, chunksize=_DOWNLOAD_CHUNK_SIZE)
            done = False
            while not done:
                _, done = downloader.next_chunk()

    def delete_document(self, document_id: str) -> None:
        with translate_provider_errors(STAGE_CLEANUP, DocumentWorkflowError):
            self._drive.files().delete(fileId=document_id).execute()

    def _delete_quietly(self, file_id: str) -> None:
        try:
            self.delete_document(file_id)
        except DocumentWorkflowError as exc:
            logger.warning("Temporary Drive file %s was not removed: %s", file_id, exc)

    def close(self) -> None:
        for service in (self._docs, self._drive):
            closer = getattr(service, "close", None)
            if callable(closer):
                closer()


__all__ = [
    "GoogleDocumentProvider",
    "PDF_MIME_TYPE",
    "SCOPES",
    "find_text_index",
    "translate_provider_errors",
    "utf16_length",
]
