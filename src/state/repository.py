"""Contract for the versioned document store that holds check and job state.

Every read and write of state goes through a StateRepository. Implementations
must make update() an atomic compare-and-swap on the resource version:

    get     -> Document             | NotFoundError
    create  -> Document             | AlreadyExistsError
    update  -> Document (new rv)    | NotFoundError | ConflictError

Any other failure is raised as StoreError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import Document


class StateRepository(ABC):
    """Versioned document store keyed by (kind, name, namespace)."""

    @abstractmethod
    def get(self, kind: str, name: str, namespace: str) -> Document:
        """Fetch the current document, including its resource version."""

    @abstractmethod
    def create(self, document: Document, namespace: str) -> Document:
        """Store a new document and return it with its assigned version."""

    @abstractmethod
    def update(self, document: Document, namespace: str) -> Document:
        """Replace the stored document if its resource version still matches."""
