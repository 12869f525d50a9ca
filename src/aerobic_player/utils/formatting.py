"""Human readable formatting of playback times for console output."""

from __future__ import annotations

import math


def format_duration(seconds: float | None) -> str:
    """Format *seconds* as ``MM:SS``; empty for unknown or non-positive values."""
    if seconds is None or not math.isfinite(seconds) or seconds <= 0:
        return ""
    total = math.floor(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_window(start: float, end: float) -> str:
    return f"{format_duration(start) or '00:00'} - {format_duration(end) or '00:00'}"


def progress_bar(current: float, duration: float, width: int = 24) -> str:
    """Render ``current / duration`` as a fixed-width text bar."""
    if width <= 0:
        return ""
    if not math.isfinite(duration) or duration <= 0:
        filled = 0
    else:
        ratio = min(1.0, max(0.0, current / duration))
        filled = round(ratio * width)
    return "#" * filled + "-" * (width - filled)
