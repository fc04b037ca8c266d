"""Per-document mutual exclusion for the signing phase."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from app.domain.exceptions import DocumentBusyError


class _LockEntry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class DocumentLockRegistry:
    """Hand out one exclusive lock per document id.

    Entries are reference counted and dropped once no thread holds or waits
    for them, so the table does not grow with the number of documents.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _LockEntry] = {}

    @contextmanager
    def hold(self, document_id: str, *, timeout: float | None = None) -> Iterator[None]:
        """Hold the lock of ``document_id`` for the duration of the block.

        Raises :class:`DocumentBusyError` when ``timeout`` seconds elapse
        before the lock becomes available.
        """

        with self._guard:
            entry = self._entries.setdefault(document_id, _LockEntry())
            entry.holders += 1
        try:
            acquired = entry.lock.acquire(timeout=-1 if timeout is None else timeout)
            if not acquired:
                raise DocumentBusyError(
                    f"Document {document_id} is being signed by another request"
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    self._entries.pop(document_id, None)

    def is_locked(self, document_id: str) -> bool:
        with self._guard:
            entry = self._entries.get(document_id)
        return entry is not None and entry.lock.locked()


document_locks = DocumentLockRegistry()


__all__ = ["DocumentLockRegistry", "document_locks"]
