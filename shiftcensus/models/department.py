from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from . import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True)
    org_code = Column(String(32), ForeignKey("organizations.code"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
