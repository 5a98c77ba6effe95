"""Timezone conversion utilities for CLI input and display."""

import os
from datetime import datetime, timezone
from typing import Optional


def _get_configured_tz():
    """Return the configured timezone, falling back to system local."""
    from dateutil import tz as dateutil_tz
    tz_name = os.getenv("TASKTRACK_TIMEZONE")
    if tz_name:
        tz = dateutil_tz.gettz(tz_name)
        if tz:
            return tz
    return dateutil_tz.tzlocal()


def parse_local(local_str: str) -> datetime:
    """Parse a local date/datetime string into an aware UTC datetime.

    Accepts: 'YYYY-MM-DD HH:MM[:SS]', 'YYYY-MM-DDTHH:MM[:SS]', 'YYYY-MM-DD'
    (a bare date means the end of that local day). Strings with an explicit
    offset or a Z suffix are taken as-is.
    """
    from dateutil import parser as dateutil_parser
    try:
        dt = dateutil_parser.isoparse(local_str.strip().replace(" ", "T"))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: {local_str}") from None
    if dt.tzinfo is None:
        if len(local_str.strip()) == 10:
            dt = dt.replace(hour=23, minute=59, second=59)
        dt = dt.replace(tzinfo=_get_configured_tz())
    return dt.astimezone(timezone.utc)


def utc_to_local(value: Optional[datetime]) -> str:
    """Format an aware datetime in the configured local zone."""
    if value is None:
        return "-"
    return value.astimezone(_get_configured_tz()).strftime("%Y-%m-%d %H:%M")
