"""Common time utilities."""

from __future__ import annotations

import datetime as dt
import zoneinfo


def processing_date(timezone: str = "UTC") -> dt.date:
    """Return today's calendar date in the given IANA timezone."""
    return dt.datetime.now(zoneinfo.ZoneInfo(timezone)).date()
