from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from . import Base


class StaffingMinimum(Base):
    __tablename__ = "staffing_minimums"
    __table_args__ = (
        CheckConstraint("min_count >= 0", name="ck_staffing_minimums_min_count"),
        CheckConstraint("dow >= 0 AND dow <= 6", name="ck_staffing_minimums_dow"),
    )

    id = Column(Integer, primary_key=True)
    org_code = Column(String(32), ForeignKey("organizations.code"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String(64), nullable=True)
    role = Column(String(64), nullable=False)
    dow = Column(Integer, nullable=False)
    min_count = Column(Integer, nullable=False, default=0)
    shift_pattern_id = Column(Integer, ForeignKey("shift_patterns.id", ondelete="SET NULL"), nullable=True)
    schedule_type = Column(String(16), nullable=False, default="regular", server_default="regular")
    created_at = Column(DateTime, server_default=func.now())

    pattern = relationship("ShiftPattern")
