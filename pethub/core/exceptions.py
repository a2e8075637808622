# pethub/core/exceptions.py
from typing import Optional


class PetHubError(Exception):
    """Base class for errors raised by the PetHub backend."""


class PetNotFoundError(PetHubError):
    """The pet document does not exist."""


class PetAccessDeniedError(PetHubError, PermissionError):
    """The pet exists but belongs to another user."""


class RecordSourceError(PetHubError):
    """
    A required record collection could not be read.

    The status calculation is aborted; no partial result is returned.
    """

    def __init__(self, collection: str, cause: Optional[BaseException] = None):
        self.collection = collection
        self.cause = cause
        message = f"Failed to read '{collection}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StatusTimeoutError(PetHubError, TimeoutError):
    """The status calculation did not finish within the caller's timeout."""


class CollectionUnavailableError(PetHubError):
    """An optional collection is not present in this deployment."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Collection '{collection}' is not available")
