"""Wire payloads exposed by the local HTTP API."""

from __future__ import annotations

from .models import (
    BookingCheckResponse,
    BookingRequest,
    ConflictReportPayload,
    InvalidateRequest,
    InvalidateResponse,
    SnapshotStatusPayload,
)
from .serializers import serialize_booking_check, serialize_snapshot_status

__all__ = [
    "BookingCheckResponse",
    "BookingRequest",
    "ConflictReportPayload",
    "InvalidateRequest",
    "InvalidateResponse",
    "SnapshotStatusPayload",
    "serialize_booking_check",
    "serialize_snapshot_status",
]
