"""Replacement of ``{{ field }}`` placeholders in provider-side documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.domain.document_provider import DocumentProvider


def placeholder_token(key: str) -> str:
    """Return the literal token replaced for ``key``."""

    return f"{{{{ {key} }}}}"


def build_replacement_requests(mapping: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Return one case-sensitive ``replaceAllText`` request per mapping entry."""

    return [
        {
            "replaceAllText": {
                "containsText": {"text": placeholder_token(key), "matchCase": True},
                "replaceText": "" if value is None else str(value),
            }
        }
        for key, value in mapping.items()
    ]


def substitute_placeholders(
    provider: DocumentProvider, document_id: str, mapping: Mapping[str, Any]
) -> None:
    """Replace every placeholder of ``mapping`` in ``document_id`` in one batch.

    The provider applies the whole batch or fails with
    :class:`~app.domain.exceptions.SubstitutionFailedError`.
    """

    requests = build_replacement_requests(mapping)
    if not requests:
        return
    provider.batch_update(document_id, requests)


__all__ = [
    "build_replacement_requests",
    "placeholder_token",
    "substitute_placeholders",
]
