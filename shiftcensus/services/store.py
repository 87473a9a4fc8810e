"""Storage operations the schedule pipeline runs against.

Each method is a single unit of work: it commits on success, and on any
SQLAlchemy failure it rolls back and raises :class:`StorageError`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from functools import wraps
from typing import Iterable, Sequence

from sqlalchemy import or_, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..constants import BATCH_STATUS_DRAFT, BATCH_STATUS_PUBLISHED
from ..errors import StorageError
from ..models import (
    Department,
    Organization,
    ScheduleBatch,
    ScheduleRun,
    ScheduleSlot,
    Shift,
    ShiftPattern,
    StaffingMinimum,
)

logger = logging.getLogger(__name__)

SHIFT_CONFLICT_KEY = ("natural_key",)
SHIFT_UPDATE_COLUMNS = (
    "org_code",
    "department_id",
    "shift_date",
    "start_local",
    "end_local",
    "timezone",
    "start_time",
    "end_time",
    "role",
    "unit",
    "shift_type",
    "shift_pattern_id",
    "position_no",
    "is_on_call",
    "staff_id",
    "schedule_slot_id",
    "is_published",
    "published_at",
)


def _storage_call(func):
    @wraps(func)
    def wrapper(self: "ScheduleStore", *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage call %s failed", func.__name__)
            raise StorageError(str(exc)) from exc

    return wrapper


class ScheduleStore:
    def __init__(self, db: Session):
        self.db = db

    def _insert(self, table):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise StorageError(f"Upsert is not supported on the {dialect} dialect")

    @_storage_call
    def resolve_department(self, department_id: int) -> Department | None:
        return self.db.query(Department).filter(Department.id == department_id).one_or_none()

    @_storage_call
    def get_organization(self, org_code: str) -> Organization | None:
        return self.db.query(Organization).filter(Organization.code == org_code).one_or_none()

    @_storage_call
    def list_staffing_rules(self, org_code: str, department_id: int, schedule_type: str) -> list[StaffingMinimum]:
        return (
            self.db.query(StaffingMinimum)
            .filter(
                StaffingMinimum.org_code == org_code,
                StaffingMinimum.department_id == department_id,
                StaffingMinimum.schedule_type == schedule_type,
            )
            .order_by(StaffingMinimum.id)
            .all()
        )

    @_storage_call
    def list_patterns(self, org_code: str, pattern_ids: Iterable[int]) -> list[ShiftPattern]:
        ids = sorted({pattern_id for pattern_id in pattern_ids if pattern_id is not None})
        if not ids:
            return []
        return (
            self.db.query(ShiftPattern)
            .filter(ShiftPattern.org_code == org_code, ShiftPattern.id.in_(ids))
            .all()
        )

    @_storage_call
    def upsert_batch(
        self,
        org_code: str,
        department_id: int,
        schedule_type: str,
        month_key: str,
        created_by: str | None,
    ) -> ScheduleBatch:
        stmt = self._insert(ScheduleBatch.__table__).values(
            org_code=org_code,
            department_id=department_id,
            schedule_type=schedule_type,
            month_key=month_key,
            status=BATCH_STATUS_DRAFT,
            created_by=created_by,
            updated_at=datetime.utcnow(),
        )
        # Status is left alone on conflict: a published batch stays published.
        stmt = stmt.on_conflict_do_update(
            index_elements=["department_id", "schedule_type", "month_key"],
            set_={"created_by": stmt.excluded.created_by, "updated_at": stmt.excluded.updated_at},
        )
        self.db.execute(stmt)
        self.db.commit()
        return (
            self.db.query(ScheduleBatch)
            .filter(
                ScheduleBatch.department_id == department_id,
                ScheduleBatch.schedule_type == schedule_type,
                ScheduleBatch.month_key == month_key,
            )
            .populate_existing()
            .one()
        )

    @_storage_call
    def get_batch(self, batch_id: int) -> ScheduleBatch | None:
        return (
            self.db.query(ScheduleBatch)
            .filter(ScheduleBatch.id == batch_id)
            .populate_existing()
            .one_or_none()
        )

    @_storage_call
    def list_batches(
        self,
        org_code: str,
        department_id: int | None = None,
        month_key: str | None = None,
    ) -> list[ScheduleBatch]:
        query = self.db.query(ScheduleBatch).filter(ScheduleBatch.org_code == org_code)
        if department_id is not None:
            query = query.filter(ScheduleBatch.department_id == department_id)
        if month_key:
            query = query.filter(ScheduleBatch.month_key == month_key)
        return query.order_by(ScheduleBatch.month_key.desc(), ScheduleBatch.id).all()

    @_storage_call
    def claim_batch(self, batch_id: int, lease_seconds: int, now: datetime | None = None) -> bool:
        now = now or datetime.utcnow()
        result = self.db.execute(
            update(ScheduleBatch)
            .where(
                ScheduleBatch.id == batch_id,
                or_(ScheduleBatch.locked_until.is_(None), ScheduleBatch.locked_until <= now),
            )
            .values(locked_until=now + timedelta(seconds=lease_seconds))
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    @_storage_call
    def release_batch(self, batch_id: int) -> None:
        self.db.execute(
            update(ScheduleBatch)
            .where(ScheduleBatch.id == batch_id)
            .values(locked_until=None)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    @_storage_call
    def mark_published(self, batch: ScheduleBatch, published_by: str | None, now: datetime) -> ScheduleBatch:
        batch.status = BATCH_STATUS_PUBLISHED
        batch.published_at = now
        batch.published_by = published_by
        self.db.commit()
        return batch

    @_storage_call
    def delete_slots(self, batch_id: int) -> int:
        removed = (
            self.db.query(ScheduleSlot)
            .filter(ScheduleSlot.batch_id == batch_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed

    @_storage_call
    def insert_slots(self, rows: Sequence[dict]) -> int:
        if not rows:
            return 0
        self.db.execute(ScheduleSlot.__table__.insert(), list(rows))
        self.db.commit()
        return len(rows)

    @_storage_call
    def list_slots(self, batch_id: int, with_template: bool = False) -> list[ScheduleSlot]:
        query = self.db.query(ScheduleSlot).filter(ScheduleSlot.batch_id == batch_id)
        if with_template:
            query = query.options(joinedload(ScheduleSlot.template))
        return query.order_by(ScheduleSlot.slot_date, ScheduleSlot.role, ScheduleSlot.position_no, ScheduleSlot.id).all()

    @_storage_call
    def upsert_shifts(self, rows: Sequence[dict], conflict_key: Sequence[str] = SHIFT_CONFLICT_KEY) -> int:
        if not rows:
            return 0
        stmt = self._insert(Shift.__table__)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_key),
            set_={column: getattr(stmt.excluded, column) for column in SHIFT_UPDATE_COLUMNS}
            | {"updated_at": datetime.utcnow()},
        )
        self.db.execute(stmt, list(rows))
        self.db.commit()
        return len(rows)

    @_storage_call
    def record_run(
        self,
        batch: ScheduleBatch,
        generated_by: str | None,
        slots_created: int,
        note: str | None,
    ) -> ScheduleRun:
        run = ScheduleRun(
            batch_id=batch.id,
            org_code=batch.org_code,
            department_id=batch.department_id,
            schedule_type=batch.schedule_type,
            month_key=batch.month_key,
            generated_by=generated_by,
            slots_created=slots_created,
            note=note,
        )
        self.db.add(run)
        self.db.commit()
        return run
