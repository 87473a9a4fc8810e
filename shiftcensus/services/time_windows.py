from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")

LocalTime = str | time | None


@dataclass(frozen=True)
class ShiftTimes:
    """Absolute and wall-clock bounds of one shift occurrence.

    ``start_utc``/``end_utc`` are naive UTC datetimes (the storage convention)
    and are ``None`` when the pattern has no usable start/end time.
    """

    shift_date: date
    timezone: str
    start_utc: datetime | None
    end_utc: datetime | None
    start_local: str | None
    end_local: str | None

    @property
    def has_times(self) -> bool:
        return self.start_utc is not None and self.end_utc is not None


def coerce_local_time(value: LocalTime) -> time | None:
    """Accept ``HH:MM``/``HH:MM:SS`` text or a ``time``; return None for anything else."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    match = _TIME_RE.match(str(value).strip())
    if not match:
        return None
    hour, minute, second = (int(part or 0) for part in match.groups())
    try:
        return time(hour, minute, second)
    except ValueError:
        return None


def format_local_time(value: LocalTime) -> str | None:
    parsed = coerce_local_time(value)
    return parsed.strftime("%H:%M:%S") if parsed else None


def resolve_timezone(*candidates: str | None) -> tuple[str, ZoneInfo]:
    """First candidate that names a known IANA zone, else the configured default."""
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return candidate, ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, falling back", candidate)
    return settings.default_timezone, ZoneInfo(settings.default_timezone)


def is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def materialize(
    shift_date: date,
    start_local: LocalTime,
    end_local: LocalTime,
    tz_name: str | None = None,
    fallback_timezone: str | None = None,
) -> ShiftTimes:
    tz_value, tz = resolve_timezone(tz_name, fallback_timezone)
    start_clock = coerce_local_time(start_local)
    end_clock = coerce_local_time(end_local)
    if start_clock is None or end_clock is None:
        return ShiftTimes(
            shift_date=shift_date,
            timezone=tz_value,
            start_utc=None,
            end_utc=None,
            start_local=None,
            end_local=None,
        )

    # fold=0: ambiguous wall times take the earlier (daylight) offset and times
    # inside a spring-forward gap land after it, shifted by the gap length.
    start = datetime.combine(shift_date, start_clock, tz)
    end = datetime.combine(shift_date, end_clock, tz)
    if end_clock <= start_clock:
        end = datetime.combine(shift_date + timedelta(days=1), end_clock, tz)

    return ShiftTimes(
        shift_date=shift_date,
        timezone=tz_value,
        start_utc=_to_naive_utc(start),
        end_utc=_to_naive_utc(end),
        start_local=start_clock.strftime("%H:%M:%S"),
        end_local=end_clock.strftime("%H:%M:%S"),
    )


def _to_naive_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def iso_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"
