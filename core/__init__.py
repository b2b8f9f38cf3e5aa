"""Core sync and domain package for the TourLedger application."""

from .errors import (
    AuthFailure,
    MirrorError,
    MirrorErrorKind,
    PermissionDenied,
    StoreError,
    TransportFailure,
    ValidationError,
    WriteError,
)
from .gateway import EntryGateway, SubmitResult
from .mirror import LiveCollectionMirror
from .models import (
    ALL_MONTHS,
    BusinessProjectRecord,
    DashboardData,
    DashboardStats,
    DataItem,
    EntityKind,
    FormState,
    GroupStatus,
    SyncStatus,
    TravelGroupRecord,
    ViewMode,
)
from .normalizer import normalize_record
from .store import AnonymousAuth, InMemoryStore, RemoteDocument, RemoteStore
from .sync_status import SyncStatusTracker

__all__ = [
    "ALL_MONTHS",
    "AnonymousAuth",
    "AuthFailure",
    "BusinessProjectRecord",
    "DashboardData",
    "DashboardStats",
    "DataItem",
    "EntityKind",
    "EntryGateway",
    "FormState",
    "GroupStatus",
    "InMemoryStore",
    "LiveCollectionMirror",
    "MirrorError",
    "MirrorErrorKind",
    "PermissionDenied",
    "RemoteDocument",
    "RemoteStore",
    "StoreError",
    "SubmitResult",
    "SyncStatus",
    "SyncStatusTracker",
    "TransportFailure",
    "TravelGroupRecord",
    "ValidationError",
    "ViewMode",
    "WriteError",
    "normalize_record",
]
