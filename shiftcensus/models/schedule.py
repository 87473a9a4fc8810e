from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from . import Base


class ScheduleBatch(Base):
    __tablename__ = "schedule_batches"
    __table_args__ = (
        UniqueConstraint("department_id", "schedule_type", "month_key", name="uq_schedule_batch_month"),
    )

    id = Column(Integer, primary_key=True)
    org_code = Column(String(32), ForeignKey("organizations.code"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    schedule_type = Column(String(16), nullable=False, default="regular")
    month_key = Column(String(7), nullable=False)
    status = Column(String(16), nullable=False, default="draft", server_default="draft")
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    published_at = Column(DateTime, nullable=True)
    published_by = Column(String(64), nullable=True)
    locked_until = Column(DateTime, nullable=True)

    slots = relationship("ScheduleSlot", back_populates="batch", cascade="all, delete-orphan", passive_deletes=True)
    runs = relationship("ScheduleRun", back_populates="batch", cascade="all, delete-orphan", passive_deletes=True)


class ScheduleRun(Base):
    __tablename__ = "schedule_runs"

    id = Column(Integer, primary_key=True)
    batch_id = Column(Integer, ForeignKey("schedule_batches.id", ondelete="CASCADE"), nullable=False, index=True)
    org_code = Column(String(32), nullable=False)
    department_id = Column(Integer, nullable=False)
    schedule_type = Column(String(16), nullable=False)
    month_key = Column(String(7), nullable=False)
    generated_by = Column(String(64), nullable=True)
    slots_created = Column(Integer, nullable=False, default=0)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    batch = relationship("ScheduleBatch", back_populates="runs")


class ScheduleSlot(Base):
    __tablename__ = "schedule_slots"
    # Slot ids are never reused, so shifts can tell regenerated slots apart.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    batch_id = Column(Integer, ForeignKey("schedule_batches.id", ondelete="CASCADE"), nullable=False, index=True)
    org_code = Column(String(32), nullable=False)
    department_id = Column(Integer, nullable=False)
    schedule_type = Column(String(16), nullable=False)
    slot_date = Column(Date, nullable=False)
    template_id = Column(Integer, ForeignKey("shift_patterns.id", ondelete="SET NULL"), nullable=True)
    staffing_minimum_id = Column(Integer, ForeignKey("staffing_minimums.id", ondelete="SET NULL"), nullable=True)
    unit_id = Column(String(64), nullable=True)
    role = Column(String(64), nullable=False)
    position_no = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    timezone = Column(String(64), nullable=True)
    assigned_staff_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    batch = relationship("ScheduleBatch", back_populates="slots")
    template = relationship("ShiftPattern")
