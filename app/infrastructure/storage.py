"""Local file storage for exported PDFs and staged signature images."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

logger = logging.getLogger(__name__)

_PARTIAL_SUFFIX = ".part"


def sanitize_filename(name: str, *, default: str = "document") -> str:
    """Return ``name`` transformed into a filesystem-safe slug."""

    cleaned = re.sub(r"[^A-Za-z0-9_.-]+", "_", name.strip())
    cleaned = cleaned.strip("._")
    return cleaned or default


def ensure_directory(directory: Path) -> Path:
    """Create ``directory`` (and parents) when missing and return it."""

    directory.mkdir(parents=True, exist_ok=True)
    return directory


def build_staging_path(directory: Path, suffix: str) -> Path:
    """Return a collision-free path inside ``directory`` with ``suffix``."""

    ensure_directory(directory)
    return directory / f"{uuid4().hex}{suffix}"


def write_atomically(destination: Path, writer: Callable[[BinaryIO], None]) -> Path:
    """Let ``writer`` fill a temporary sibling of ``destination`` then rename it.

    The temporary file is removed when ``writer`` raises, so ``destination`` is
    either left untouched or replaced by a completely written file.
    """

    ensure_directory(destination.parent)
    partial = destination.with_name(
        f".{destination.name}.{uuid4().hex}{_PARTIAL_SUFFIX}"
    )
    try:
        with partial.open("wb") as handle:
            writer(handle)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(partial, destination)
    except BaseException:
        discard_file(partial)
        raise
    return destination


def promote_file(source: Path, destination: Path) -> Path:
    """Move the completed file ``source`` over ``destination`` in one step."""

    ensure_directory(destination.parent)
    os.replace(source, destination)
    return destination


def discard_file(path: Path) -> None:
    """Delete ``path`` if it exists, logging instead of raising on failure."""

    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)


__all__ = [
    "build_staging_path",
    "discard_file",
    "ensure_directory",
    "promote_file",
    "sanitize_filename",
    "write_atomically",
]
