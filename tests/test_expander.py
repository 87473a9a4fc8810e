import logging
from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from shiftcensus.errors import ValidationError
from shiftcensus.services.expander import day_of_week, expand, parse_month


def make_rule(rule_id=1, dow=3, min_count=2, pattern_id=10, role="RN", unit_id=None):
    return SimpleNamespace(
        id=rule_id,
        dow=dow,
        min_count=min_count,
        shift_pattern_id=pattern_id,
        role=role,
        unit_id=unit_id,
    )


def make_pattern(pattern_id=10, start=time(6, 0), end=time(18, 0), tz="America/Los_Angeles"):
    return SimpleNamespace(
        id=pattern_id,
        name=f"P{pattern_id}",
        start_local=start,
        end_local=end,
        timezone=tz,
        is_on_call=False,
    )


def test_wednesdays_in_leap_february():
    slots = expand([make_rule()], "2024-02", {10: make_pattern()})

    assert len(slots) == 8
    assert sorted({slot.slot_date for slot in slots}) == [
        date(2024, 2, 7),
        date(2024, 2, 14),
        date(2024, 2, 21),
        date(2024, 2, 28),
    ]
    for day in {slot.slot_date for slot in slots}:
        assert [slot.position_no for slot in slots if slot.slot_date == day] == [1, 2]


def test_covers_every_day_of_month():
    rules = [make_rule(rule_id=dow, dow=dow, min_count=1) for dow in range(7)]

    slots = expand(rules, "2024-02", {10: make_pattern()})

    assert len(slots) == 29
    assert slots[0].slot_date == date(2024, 2, 1)
    assert slots[-1].slot_date == date(2024, 2, 29)


def test_zero_minimum_produces_nothing():
    assert expand([make_rule(min_count=0)], "2024-02", {10: make_pattern()}) == []


def test_missing_pattern_is_skipped_with_warning(caplog):
    rules = [make_rule(rule_id=1, pattern_id=99), make_rule(rule_id=2, pattern_id=10, min_count=1)]

    with caplog.at_level(logging.WARNING, logger="shiftcensus.services.expander"):
        slots = expand(rules, "2024-02", {10: make_pattern()})

    assert len(slots) == 4
    assert [record.getMessage() for record in caplog.records] == [
        "Staffing rule 1 references missing shift pattern 99; skipped"
    ]
    assert {slot.rule_id for slot in slots} == {2}


def test_rule_without_pattern_keeps_dates_without_instants():
    slots = expand([make_rule(pattern_id=None, min_count=1)], "2024-02", {}, "America/Chicago")

    assert len(slots) == 4
    assert all(slot.start_utc is None and slot.end_utc is None for slot in slots)
    assert all(slot.timezone == "America/Chicago" for slot in slots)


def test_times_follow_each_patterns_zone():
    tokyo = make_pattern(pattern_id=11, tz="Asia/Tokyo")
    slots = expand([make_rule(pattern_id=11, min_count=1)], "2024-02", {11: tokyo})

    first = slots[0]
    assert first.slot_date == date(2024, 2, 7)
    assert first.timezone == "Asia/Tokyo"
    assert first.start_utc == datetime(2024, 2, 6, 21, 0)


def test_order_is_date_then_rule_then_position():
    rules = [
        make_rule(rule_id=5, dow=3, min_count=2, role="CNA"),
        make_rule(rule_id=6, dow=4, min_count=1, role="RN"),
        make_rule(rule_id=7, dow=3, min_count=1, role="LPN"),
    ]

    slots = expand(rules, "2024-02", {10: make_pattern()})
    keys = [(slot.slot_date, slot.rule_id, slot.position_no) for slot in slots[:5]]

    assert keys == [
        (date(2024, 2, 1), 6, 1),
        (date(2024, 2, 7), 5, 1),
        (date(2024, 2, 7), 5, 2),
        (date(2024, 2, 7), 7, 1),
        (date(2024, 2, 8), 6, 1),
    ]


def test_expansion_is_deterministic():
    rules = [make_rule(), make_rule(rule_id=2, dow=0, min_count=3, unit_id="North")]
    patterns = {10: make_pattern()}

    assert expand(rules, "2024-03", patterns) == expand(rules, "2024-03", patterns)


@pytest.mark.parametrize("value", ["2024-13", "2024-00", "24-01", "2024/02", "", None, "2024-02-01", "abcd-ef"])
def test_parse_month_rejects_malformed(value):
    with pytest.raises(ValidationError):
        parse_month(value)


def test_parse_month_pads_single_digit():
    month = parse_month("2024-2")

    assert month.key == "2024-02"
    assert month.last_day == date(2024, 2, 29)


def test_day_of_week_is_sunday_based():
    assert day_of_week(date(2024, 2, 4)) == 0
    assert day_of_week(date(2024, 2, 7)) == 3
    assert day_of_week(date(2024, 2, 10)) == 6
