"""Display formatting for events."""

from __future__ import annotations

from datetime import datetime


def format_timestamp(ts: datetime) -> str:
    """``Oct 19, 14:05:09`` -- 24-hour clock, used for display and search."""
    return ts.strftime("%b %d, %H:%M:%S")


def bucket_label(ts: datetime) -> str:
    """``14:05`` -- time-series bucket label."""
    return ts.strftime("%H:%M")


def format_duration(seconds: int) -> str:
    """Compact human duration: ``45s``, ``3m``, ``3m 5s``, ``1h``, ``1h 5m``."""
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"
