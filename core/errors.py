"""Error taxonomy for the TourLedger sync core."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

__all__ = [
    "TourLedgerError",
    "AuthFailure",
    "StoreError",
    "PermissionDenied",
    "TransportFailure",
    "DocumentNotFound",
    "MirrorErrorKind",
    "MirrorError",
    "ValidationError",
    "WriteError",
]


class TourLedgerError(Exception):
    """Base class for errors raised by the sync core."""


class AuthFailure(TourLedgerError):
    """Raised when no user identity could be obtained at startup."""


class StoreError(TourLedgerError):
    """Raised by a remote store when an operation is rejected."""


class PermissionDenied(StoreError):
    """The store refused access to a collection or document."""


class TransportFailure(StoreError):
    """The store could not be reached or returned a transport error."""


class DocumentNotFound(StoreError):
    """An update or delete targeted an identity the store does not hold."""


class MirrorErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    TRANSPORT_FAILURE = "transport_failure"


class MirrorError(TourLedgerError):
    """A subscription failure surfaced by a live collection mirror."""

    def __init__(self, kind: MirrorErrorKind, collection: str, message: str) -> None:
        super().__init__(f"{collection}: {message}")
        self.kind = kind
        self.collection = collection
        self.message = message

    @classmethod
    def from_store_error(cls, collection: str, error: BaseException) -> "MirrorError":
        kind = (
            MirrorErrorKind.PERMISSION_DENIED
            if isinstance(error, PermissionDenied)
            else MirrorErrorKind.TRANSPORT_FAILURE
        )
        return cls(kind, collection, str(error) or type(error).__name__)


class ValidationError(TourLedgerError):
    """Raised before any network call when required draft fields are blank."""

    def __init__(self, missing_fields: Iterable[str]) -> None:
        self.missing_fields = tuple(missing_fields)
        super().__init__("Missing required fields: " + ", ".join(self.missing_fields))


class WriteError(TourLedgerError):
    """Raised when the remote store rejects a create, update or delete."""

    def __init__(self, operation: str, collection: str, cause: BaseException) -> None:
        super().__init__(f"{operation} on {collection} failed: {cause}")
        self.operation = operation
        self.collection = collection
        self.cause = cause
