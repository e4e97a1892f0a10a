from __future__ import annotations

from typing import Any, Dict, Optional

from ..domain import ConflictReport, SchedulingCheck, Snapshot
from .models import BookingCheckResponse, SnapshotStatusPayload


def serialize_snapshot_status(snapshot: Snapshot, *, stale: bool) -> Dict[str, Any]:
    return SnapshotStatusPayload.from_domain(snapshot, stale=stale).model_dump(by_alias=True)


def serialize_booking_check(
    check: SchedulingCheck,
    report: Optional[ConflictReport] = None,
    *,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    return BookingCheckResponse.from_domain(check, report, message=message).model_dump(by_alias=True)
