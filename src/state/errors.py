"""Error taxonomy for the state store and the state service."""

from __future__ import annotations


class StoreError(Exception):
    """Raised when the document store fails for any reason."""

    def __init__(
        self,
        message: str,
        *,
        kind: str = "",
        name: str = "",
        namespace: str = "",
    ) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(message)

    @property
    def identifier(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"


class NotFoundError(StoreError):
    """Raised when the requested document does not exist."""


class AlreadyExistsError(StoreError):
    """Raised when creating a document whose key is already taken."""


class ConflictError(StoreError):
    """Raised when an update carries a stale resource version."""


class StateError(Exception):
    """Raised by the state service; wraps the underlying store error."""

    def __init__(self, message: str, *, kind: str, name: str, namespace: str) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(message)


class ExistenceCheckError(StateError):
    """Raised when a state resource could not be verified or created."""


class StateFetchError(StateError):
    """Raised when a state resource could not be retrieved."""
