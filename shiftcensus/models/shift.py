from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from . import Base


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        UniqueConstraint("natural_key", name="uq_shifts_natural_key"),
    )

    id = Column(Integer, primary_key=True)
    org_code = Column(String(32), nullable=False, index=True)
    department_id = Column(Integer, nullable=False)
    shift_date = Column(Date, nullable=False)
    start_local = Column(String(8), nullable=True)
    end_local = Column(String(8), nullable=True)
    timezone = Column(String(64), nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    role = Column(String(64), nullable=True)
    unit = Column(String(64), nullable=True)
    shift_type = Column(String(120), nullable=True)
    shift_pattern_id = Column(Integer, nullable=True)
    position_no = Column(Integer, nullable=False, default=1)
    is_on_call = Column(Boolean, nullable=False, default=False, server_default="false")
    staff_id = Column(String(64), nullable=True)
    schedule_slot_id = Column(Integer, ForeignKey("schedule_slots.id", ondelete="SET NULL"), nullable=True, index=True)
    natural_key = Column(String(255), nullable=False)
    is_published = Column(Boolean, nullable=False, default=False, server_default="false")
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
