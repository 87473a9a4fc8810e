"""Expand recurring staffing minimums into the concrete slots of one month."""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, Mapping, Protocol, Sequence

from ..errors import ValidationError
from .time_windows import materialize

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


class RuleLike(Protocol):
    id: int
    unit_id: str | None
    role: str
    dow: int
    min_count: int
    shift_pattern_id: int | None


class PatternLike(Protocol):
    id: int
    name: str
    start_local: time | None
    end_local: time | None
    timezone: str | None
    is_on_call: bool


@dataclass(frozen=True)
class MonthKey:
    year: int
    month: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def days(self) -> Iterator[date]:
        cursor = self.first_day
        last = self.last_day
        while cursor <= last:
            yield cursor
            cursor += timedelta(days=1)


@dataclass(frozen=True)
class SlotDraft:
    rule_id: int
    slot_date: date
    template_id: int | None
    unit_id: str | None
    role: str
    position_no: int
    timezone: str
    start_utc: datetime | None
    end_utc: datetime | None


def parse_month(value: str | None) -> MonthKey:
    match = _MONTH_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError("Invalid month. Use YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise ValidationError("Invalid month. Use YYYY-MM")
    return MonthKey(year, month)


def day_of_week(value: date) -> int:
    """Sunday=0 .. Saturday=6."""
    return (value.weekday() + 1) % 7


def expand(
    rules: Sequence[RuleLike],
    month: str | MonthKey,
    patterns_by_id: Mapping[int, PatternLike],
    default_timezone: str | None = None,
) -> list[SlotDraft]:
    month_key = month if isinstance(month, MonthKey) else parse_month(month)

    usable: list[tuple[RuleLike, PatternLike | None]] = []
    for rule in rules:
        if (rule.min_count or 0) <= 0:
            continue
        pattern = None
        if rule.shift_pattern_id is not None:
            pattern = patterns_by_id.get(rule.shift_pattern_id)
            if pattern is None:
                _warn_missing_pattern(rule)
                continue
        usable.append((rule, pattern))

    drafts: list[SlotDraft] = []
    # Every zone shares the same calendar dates, so the local date of each day
    # is the date itself and its weekday holds in the pattern's own zone.
    for day in month_key.days():
        dow = day_of_week(day)
        for rule, pattern in usable:
            if int(rule.dow) != dow:
                continue
            times = materialize(
                day,
                pattern.start_local if pattern else None,
                pattern.end_local if pattern else None,
                pattern.timezone if pattern else None,
                default_timezone,
            )
            for position in range(1, int(rule.min_count) + 1):
                drafts.append(
                    SlotDraft(
                        rule_id=rule.id,
                        slot_date=day,
                        template_id=pattern.id if pattern else None,
                        unit_id=rule.unit_id or None,
                        role=rule.role,
                        position_no=position,
                        timezone=times.timezone,
                        start_utc=times.start_utc,
                        end_utc=times.end_utc,
                    )
                )
    return drafts


def _warn_missing_pattern(rule: RuleLike) -> None:
    message = f"Staffing rule {rule.id} references missing shift pattern {rule.shift_pattern_id}; skipped"
    logger.warning(message)
