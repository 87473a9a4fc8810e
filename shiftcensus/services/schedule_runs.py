"""Generate draft schedule batches from staffing minimums and publish them as live shifts.

``generate_schedule`` replaces the slots of a (department, schedule type, month)
batch wholesale, so calling it again is the recovery path for a failed run.
``publish_batch`` upserts one live shift per slot on the shift natural key, so
publishing twice converges on the same rows.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Sequence

from ..config import get_settings
from ..constants import SCHEDULE_TYPE_ONCALL, normalize_schedule_type
from ..context import RequestContext
from ..errors import ConflictError, NotFoundError, StorageError, ValidationError
from ..models import ScheduleBatch, ScheduleRun, ScheduleSlot
from .expander import SlotDraft, expand, parse_month
from .store import ScheduleStore
from .time_windows import materialize

logger = logging.getLogger(__name__)
settings = get_settings()

NO_RULES_NOTE = "No staffing_minimums rows found for that department/schedule_type."
NO_SLOTS_NOTE = "Staffing minimums matched no days with a resolvable shift pattern."
EMPTY_BATCH_NOTE = "No slots in batch."


@dataclass(frozen=True)
class GenerateOutcome:
    batch: ScheduleBatch
    run: ScheduleRun
    slots_created: int
    note: str | None = None


@dataclass(frozen=True)
class PublishOutcome:
    batch: ScheduleBatch
    shifts_upserted: int
    note: str | None = None


def chunked(rows: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    size = max(1, int(size))
    for index in range(0, len(rows), size):
        yield rows[index : index + size]


def shift_natural_key(slot: ScheduleSlot, is_on_call: bool) -> str:
    """One key per slot; stable across regeneration while the originating rule survives."""
    if slot.staffing_minimum_id is not None:
        rule_part = str(slot.staffing_minimum_id)
    else:
        rule_part = f"slot:{slot.id}"
    parts = [
        slot.org_code,
        str(slot.department_id),
        slot.schedule_type,
        slot.slot_date.isoformat(),
        rule_part,
        slot.unit_id or "",
        slot.role or "",
        "" if slot.template_id is None else str(slot.template_id),
        str(slot.position_no),
        "1" if is_on_call else "0",
    ]
    return "|".join(parts)


@contextmanager
def _batch_lease(store: ScheduleStore, batch_id: int) -> Iterator[None]:
    if not store.claim_batch(batch_id, settings.batch_lock_seconds):
        raise ConflictError("Another schedule operation is in progress for this batch. Try again shortly.")
    try:
        yield
    except BaseException:
        try:
            store.release_batch(batch_id)
        except StorageError:
            logger.exception("Could not release lease on schedule batch %s", batch_id)
        raise
    store.release_batch(batch_id)


def _parse_department_id(value: Any) -> int:
    if value is None or value == "":
        raise ValidationError("Missing month or department_id")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid department_id") from None


def _org_timezone(store: ScheduleStore, org_code: str) -> str | None:
    org = store.get_organization(org_code)
    return org.timezone if org else None


def _slot_row(batch: ScheduleBatch, draft: SlotDraft) -> dict:
    return {
        "batch_id": batch.id,
        "org_code": batch.org_code,
        "department_id": batch.department_id,
        "schedule_type": batch.schedule_type,
        "slot_date": draft.slot_date,
        "template_id": draft.template_id,
        "staffing_minimum_id": draft.rule_id,
        "unit_id": draft.unit_id,
        "role": draft.role,
        "position_no": draft.position_no,
        "start_time": draft.start_utc,
        "end_time": draft.end_utc,
        "timezone": draft.timezone,
        "assigned_staff_id": None,
    }


def generate_schedule(
    store: ScheduleStore,
    ctx: RequestContext,
    department_id: Any,
    month: str | None,
    schedule_type: str | None = None,
    chunk_size: int | None = None,
) -> GenerateOutcome:
    if not month:
        raise ValidationError("Missing month or department_id")
    dept_id = _parse_department_id(department_id)
    month_key = parse_month(month)
    schedule_type = normalize_schedule_type(schedule_type)

    department = store.resolve_department(dept_id)
    if department is None or not ctx.can_access(department.org_code):
        raise ValidationError("Invalid department_id")
    org_code = department.org_code

    batch = store.upsert_batch(org_code, dept_id, schedule_type, month_key.key, ctx.user_id)
    with _batch_lease(store, batch.id):
        removed = store.delete_slots(batch.id)
        rules = store.list_staffing_rules(org_code, dept_id, schedule_type)
        if not rules:
            run = store.record_run(batch, ctx.user_id, 0, NO_RULES_NOTE)
            logger.info("Schedule batch %s (%s %s): no staffing rules", batch.id, schedule_type, month_key.key)
            return GenerateOutcome(batch=batch, run=run, slots_created=0, note=NO_RULES_NOTE)

        patterns = store.list_patterns(org_code, (rule.shift_pattern_id for rule in rules))
        drafts = expand(
            rules,
            month_key,
            {pattern.id: pattern for pattern in patterns},
            _org_timezone(store, org_code),
        )
        rows = [_slot_row(batch, draft) for draft in drafts]

        created = 0
        for chunk in chunked(rows, chunk_size or settings.schedule_chunk_size):
            created += store.insert_slots(chunk)

        note = None if created else NO_SLOTS_NOTE
        run = store.record_run(batch, ctx.user_id, created, note)

    logger.info(
        "Generated schedule batch %s for department %s %s (%s): %s slots, %s replaced",
        batch.id,
        dept_id,
        month_key.key,
        schedule_type,
        created,
        removed,
    )
    return GenerateOutcome(batch=batch, run=run, slots_created=created, note=note)


def _shift_row(slot: ScheduleSlot, org_timezone: str | None, published_at: datetime) -> dict:
    pattern = slot.template
    times = materialize(
        slot.slot_date,
        pattern.start_local if pattern else None,
        pattern.end_local if pattern else None,
        pattern.timezone if pattern else None,
        org_timezone,
    )
    is_on_call = bool(pattern.is_on_call) if pattern else False
    is_on_call = is_on_call or slot.schedule_type == SCHEDULE_TYPE_ONCALL
    return {
        "org_code": slot.org_code,
        "department_id": slot.department_id,
        "shift_date": slot.slot_date,
        "start_local": times.start_local,
        "end_local": times.end_local,
        "timezone": times.timezone,
        "start_time": times.start_utc,
        "end_time": times.end_utc,
        "role": slot.role,
        "unit": slot.unit_id,
        "shift_type": pattern.name if pattern else None,
        "shift_pattern_id": slot.template_id,
        "position_no": slot.position_no,
        "is_on_call": is_on_call,
        "staff_id": slot.assigned_staff_id,
        "schedule_slot_id": slot.id,
        "natural_key": shift_natural_key(slot, is_on_call),
        "is_published": True,
        "published_at": published_at,
    }


def publish_batch(
    store: ScheduleStore,
    ctx: RequestContext,
    batch_id: Any,
    chunk_size: int | None = None,
) -> PublishOutcome:
    batch = _load_batch(store, ctx, batch_id)
    with _batch_lease(store, batch.id):
        now = datetime.utcnow()
        batch = store.mark_published(batch, ctx.user_id, now)
        slots = store.list_slots(batch.id, with_template=True)
        if not slots:
            logger.info("Published schedule batch %s with no slots", batch.id)
            return PublishOutcome(batch=batch, shifts_upserted=0, note=EMPTY_BATCH_NOTE)

        org_timezone = _org_timezone(store, batch.org_code)
        rows = [_shift_row(slot, org_timezone, now) for slot in slots]
        upserted = 0
        for chunk in chunked(rows, chunk_size or settings.schedule_chunk_size):
            upserted += store.upsert_shifts(chunk)

    logger.info("Published schedule batch %s: %s shifts upserted", batch.id, upserted)
    return PublishOutcome(batch=batch, shifts_upserted=upserted)


def _load_batch(store: ScheduleStore, ctx: RequestContext, batch_id: Any) -> ScheduleBatch:
    try:
        parsed_id = int(batch_id)
    except (TypeError, ValueError):
        raise NotFoundError("Batch not found") from None
    batch = store.get_batch(parsed_id)
    if batch is None or not ctx.can_access(batch.org_code):
        raise NotFoundError("Batch not found")
    return batch


def get_batch(store: ScheduleStore, ctx: RequestContext, batch_id: Any) -> tuple[ScheduleBatch, list[ScheduleSlot]]:
    batch = _load_batch(store, ctx, batch_id)
    return batch, store.list_slots(batch.id)


def list_batches(
    store: ScheduleStore,
    ctx: RequestContext,
    department_id: int | None = None,
    month: str | None = None,
) -> list[ScheduleBatch]:
    month_key = parse_month(month).key if month else None
    return store.list_batches(ctx.org_code, department_id, month_key)
