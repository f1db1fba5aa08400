"""Timezone helpers used when rendering date fragments."""

from datetime import datetime
from typing import Optional

import pytz

from statsdb.common.exceptions import validation_error


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """Return the pytz timezone for ``name``.

    Raises:
        StatsDBError: VALIDATION_ERROR if the name is not a known timezone
    """
    try:
        return pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        raise validation_error(
            f"Unknown timezone: {name}. Use IANA timezone names like 'Europe/Berlin'",
            field="timezone",
            value=name,
        )


def get_utc_offset(name: str, at: Optional[datetime] = None) -> str:
    """Return the UTC offset of timezone ``name`` formatted as ``+HH:MM``.

    The offset is taken at ``at`` (naive values are read as UTC), defaulting
    to now, so daylight saving time is reflected for that moment only.

    Example:
        >>> get_utc_offset("Asia/Kolkata")
        '+05:30'
    """
    tz = get_timezone(name)
    if at is None:
        at = datetime.now(pytz.utc)
    elif at.tzinfo is None:
        at = pytz.utc.localize(at)
    offset = at.astimezone(tz).strftime("%z")
    return f"{offset[:3]}:{offset[3:]}"
