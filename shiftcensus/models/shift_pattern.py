from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Time, func

from . import Base


class ShiftPattern(Base):
    __tablename__ = "shift_patterns"

    id = Column(Integer, primary_key=True)
    org_code = Column(String(32), ForeignKey("organizations.code"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(120), nullable=False)
    start_local = Column(Time, nullable=True)
    end_local = Column(Time, nullable=True)
    timezone = Column(String(64), nullable=True)
    is_on_call = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = Column(DateTime, server_default=func.now())
