from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from shiftcensus.config import get_settings
from shiftcensus.services.time_windows import coerce_local_time, iso_utc, materialize

PACIFIC = "America/Los_Angeles"


def _as_local(value: datetime, tz: str) -> datetime:
    return value.replace(tzinfo=ZoneInfo("UTC")).astimezone(ZoneInfo(tz))


def test_overnight_shift_ends_next_day():
    times = materialize(date(2024, 3, 10), "22:00:00", "06:00:00", PACIFIC)

    start_local = _as_local(times.start_utc, PACIFIC)
    end_local = _as_local(times.end_utc, PACIFIC)
    assert (start_local.date(), start_local.hour) == (date(2024, 3, 10), 22)
    assert (end_local.date(), end_local.hour) == (date(2024, 3, 11), 6)
    assert times.start_utc == datetime(2024, 3, 11, 5, 0)
    assert times.end_utc == datetime(2024, 3, 11, 13, 0)


def test_day_shift_converts_to_utc():
    times = materialize(date(2024, 2, 7), "06:00", "18:00", PACIFIC)

    assert times.start_utc == datetime(2024, 2, 7, 14, 0)
    assert times.end_utc == datetime(2024, 2, 8, 2, 0)
    assert times.start_local == "06:00:00"
    assert times.end_local == "18:00:00"
    assert times.timezone == PACIFIC


def test_equal_start_and_end_is_a_full_day():
    times = materialize(date(2024, 6, 1), time(7, 0), time(7, 0), PACIFIC)

    assert (times.end_utc - times.start_utc).total_seconds() == 24 * 3600


def test_missing_or_bad_times_yield_no_instants():
    for start, end in [(None, "06:00"), ("6am", "14:00"), ("25:00", "06:00"), ("", "")]:
        times = materialize(date(2024, 2, 7), start, end, PACIFIC)
        assert times.start_utc is None
        assert times.end_utc is None
        assert not times.has_times
        assert times.shift_date == date(2024, 2, 7)


def test_default_zone_used_when_absent_or_unknown():
    default = get_settings().default_timezone

    assert materialize(date(2024, 2, 7), "06:00", "18:00").timezone == default
    assert materialize(date(2024, 2, 7), "06:00", "18:00", "Mars/Olympus").timezone == default
    assert materialize(date(2024, 2, 7), "06:00", "18:00", None, "Asia/Tokyo").timezone == "Asia/Tokyo"


def test_spring_forward_gap_moves_forward():
    times = materialize(date(2024, 3, 10), "02:30", "10:00", PACIFIC)

    assert times.start_utc == datetime(2024, 3, 10, 10, 30)
    assert _as_local(times.start_utc, PACIFIC).hour == 3


def test_fall_back_ambiguity_takes_first_occurrence():
    times = materialize(date(2024, 11, 3), "01:30", "09:00", PACIFIC)

    assert times.start_utc == datetime(2024, 11, 3, 8, 30)


def test_coerce_local_time_formats():
    assert coerce_local_time("06:00") == time(6, 0)
    assert coerce_local_time(" 22:15:30 ") == time(22, 15, 30)
    assert coerce_local_time(time(5, 4, 3, 999)) == time(5, 4, 3)
    assert coerce_local_time("6:00") is None
    assert coerce_local_time(None) is None


def test_iso_utc_marks_zulu():
    assert iso_utc(datetime(2024, 2, 7, 14, 0)) == "2024-02-07T14:00:00Z"
    assert iso_utc(None) is None
