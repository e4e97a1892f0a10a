"""Shared helpers."""

from .formatting import (
    event_moment,
    event_status_emoji,
    format_clock,
    format_event_line,
    format_friendly_date,
    format_time_range,
)

__all__ = [
    "event_moment",
    "event_status_emoji",
    "format_clock",
    "format_event_line",
    "format_friendly_date",
    "format_time_range",
]
