"""
Temporal Windowing

Splits interaction records into the current week and the week before it,
relative to an explicit reference time.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from analytics.config_loader import get_local_timezone_name
from analytics.models import InteractionRecord

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7


class TimeWindows(NamedTuple):
    """Records of the last 7 days and of the 7 days before that, newest first."""
    last_7_days: List[InteractionRecord]
    previous_7_days: List[InteractionRecord]


def get_timezone(name: Optional[str] = None) -> tzinfo:
    """
    Resolve a timezone by IANA name, defaulting to the configured local timezone.
    Falls back to UTC when the name is unknown.
    """
    name = name or get_local_timezone_name()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{name}', falling back to UTC")
        return timezone.utc


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO format timestamp into a timezone-aware datetime.

    Naive timestamps are interpreted in `tz` (configured local timezone if None)
    and every result is expressed in `tz`. Returns None instead of raising when
    the value cannot be parsed or falls outside the representable range.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        timestamp = value
    else:
        try:
            timestamp = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable timestamp {value!r}, record treated as timeless")
            return None

    tz = tz or get_timezone()
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=tz)
    try:
        # Offsets next to datetime.min/max cannot be shifted into the local timezone
        return timestamp.astimezone(tz)
    except (OverflowError, ValueError):
        logger.warning(f"Out-of-range timestamp {value!r}, record treated as timeless")
        return None


def sort_newest_first(
    records: Sequence[InteractionRecord],
    tz: Optional[tzinfo] = None
) -> List[Tuple[datetime, InteractionRecord]]:
    """Pair records with their parsed timestamps, newest first. Timeless records are dropped."""
    timed = []
    for record in records:
        timestamp = parse_timestamp(record.created_at, tz)
        if timestamp is not None:
            timed.append((timestamp, record))
    timed.sort(key=lambda item: item[0], reverse=True)
    return timed


def split_windows(
    records: Sequence[InteractionRecord],
    now: datetime,
    tz: Optional[tzinfo] = None
) -> TimeWindows:
    """
    Partition records into the current and previous 7-day windows.

    - last_7_days: created_at > now - 7d
    - previous_7_days: now - 14d < created_at <= now - 7d

    Args:
        records: Interaction records in any order
        now: Reference time; naive values are interpreted in `tz`
        tz: Timezone for naive timestamps (configured local timezone if None)

    Returns:
        TimeWindows with both windows sorted newest first
    """
    tz = tz or get_timezone()
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)

    seven_days_ago = now - timedelta(days=WINDOW_DAYS)
    fourteen_days_ago = now - timedelta(days=2 * WINDOW_DAYS)

    last_7_days = []
    previous_7_days = []
    for timestamp, record in sort_newest_first(records, tz):
        if timestamp > seven_days_ago:
            last_7_days.append(record)
        elif timestamp > fourteen_days_ago:
            previous_7_days.append(record)

    logger.debug(
        f"Windowed {len(records)} records: last 7 days={len(last_7_days)}, "
        f"previous 7 days={len(previous_7_days)}"
    )
    return TimeWindows(last_7_days=last_7_days, previous_7_days=previous_7_days)
