"""In-process versioned document store.

Used for tests and local runs without a cluster. A single lock guards the
whole map so each check-and-replace is atomic across threads.
"""

from __future__ import annotations

import logging
import threading

from .errors import AlreadyExistsError, ConflictError, NotFoundError
from .models import Document
from .repository import StateRepository

logger = logging.getLogger(__name__)


class InMemoryStore(StateRepository):
    """Dict-backed StateRepository with a store-wide revision counter."""

    def __init__(self) -> None:
        self._docs: dict[tuple[str, str, str], Document] = {}
        self._revision = 0
        self._lock = threading.Lock()

    def _next_version(self) -> str:
        self._revision += 1
        return str(self._revision)

    def get(self, kind: str, name: str, namespace: str) -> Document:
        with self._lock:
            doc = self._docs.get((kind, namespace, name))
            if doc is None:
                raise NotFoundError(
                    f"{kind} {name!r} not found in namespace {namespace!r}",
                    kind=kind, name=name, namespace=namespace,
                )
            return doc.clone()

    def create(self, document: Document, namespace: str) -> Document:
        key = (document.kind, namespace, document.name)
        with self._lock:
            if key in self._docs:
                raise AlreadyExistsError(
                    f"{document.kind} {document.name!r} already exists in namespace {namespace!r}",
                    kind=document.kind, name=document.name, namespace=namespace,
                )
            stored = document.clone()
            stored.namespace = namespace
            stored.resource_version = self._next_version()
            self._docs[key] = stored
            logger.debug("Created %s/%s/%s at rv %s", document.kind, namespace, document.name, stored.resource_version)
            return stored.clone()

    def update(self, document: Document, namespace: str) -> Document:
        key = (document.kind, namespace, document.name)
        with self._lock:
            current = self._docs.get(key)
            if current is None:
                raise NotFoundError(
                    f"{document.kind} {document.name!r} not found in namespace {namespace!r}",
                    kind=document.kind, name=document.name, namespace=namespace,
                )
            if document.resource_version != current.resource_version:
                raise ConflictError(
                    f"{document.kind} {document.name!r} was modified: "
                    f"have rv {document.resource_version!r}, store has {current.resource_version!r}",
                    kind=document.kind, name=document.name, namespace=namespace,
                )
            stored = document.clone()
            stored.namespace = namespace
            stored.resource_version = self._next_version()
            self._docs[key] = stored
            logger.debug("Updated %s/%s/%s to rv %s", document.kind, namespace, document.name, stored.resource_version)
            return stored.clone()

    def __len__(self) -> int:
        with self._lock:
            return len(self._docs)
