from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import CacheDomain, ConflictEntry, ConflictReport, SchedulingCheck, Snapshot, Suggestion


class SnapshotStatusPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    last_update: Optional[str] = Field(default=None, alias="lastUpdate")
    stale: bool
    events: int
    tasks: int
    board_cards: int = Field(alias="boardCards")

    @classmethod
    def from_domain(cls, snapshot: Snapshot, *, stale: bool) -> "SnapshotStatusPayload":
        return cls(
            last_update=_iso(snapshot.last_update),
            stale=stale,
            events=len(snapshot.events),
            tasks=len(snapshot.tasks),
            board_cards=len(snapshot.board_cards),
        )


class InvalidateRequest(BaseModel):
    domain: str = Field(default=CacheDomain.ALL.value)


class InvalidateResponse(BaseModel):
    requested: str
    refreshed: List[str] = Field(default_factory=list)


class BookingRequest(BaseModel):
    summary: str
    start: Optional[str] = Field(default=None)
    end: Optional[str] = Field(default=None)


class SuggestionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str
    offset_minutes: int = Field(alias="offsetMinutes")
    label: str

    @classmethod
    def from_domain(cls, suggestion: Suggestion) -> "SuggestionPayload":
        return cls(
            start=suggestion.start.isoformat(),
            end=suggestion.end.isoformat(),
            offset_minutes=suggestion.offset_minutes,
            label=suggestion.label,
        )


class ConflictPayload(BaseModel):
    id: str
    summary: str
    start: str
    end: str

    @classmethod
    def from_domain(cls, conflict: ConflictEntry) -> "ConflictPayload":
        return cls(id=conflict.id, summary=conflict.summary, start=conflict.start, end=conflict.end)


class ConflictReportPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_conflict: bool = Field(alias="hasConflict")
    verified: bool
    conflicts: List[ConflictPayload] = Field(default_factory=list)
    suggestions: List[SuggestionPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: ConflictReport) -> "ConflictReportPayload":
        return cls(
            has_conflict=report.has_conflict,
            verified=report.verified,
            conflicts=[ConflictPayload.from_domain(item) for item in report.conflicts],
            suggestions=[SuggestionPayload.from_domain(item) for item in report.suggestions],
        )


class BookingCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    warnings: List[str] = Field(default_factory=list)
    report: Optional[ConflictReportPayload] = Field(default=None)
    message: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(
        cls,
        check: SchedulingCheck,
        report: Optional[ConflictReport] = None,
        *,
        message: Optional[str] = None,
    ) -> "BookingCheckResponse":
        return cls(
            is_valid=check.is_valid,
            warnings=list(check.warnings),
            report=ConflictReportPayload.from_domain(report) if report else None,
            message=message,
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
