"""Aggregate application use cases."""

from .documents import generate_document, sign_document

__all__ = [
    "generate_document",
    "sign_document",
]
