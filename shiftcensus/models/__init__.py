from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .department import Department  # noqa: E402,F401
from .organization import Organization  # noqa: E402,F401
from .schedule import ScheduleBatch, ScheduleRun, ScheduleSlot  # noqa: E402,F401
from .shift import Shift  # noqa: E402,F401
from .shift_pattern import ShiftPattern  # noqa: E402,F401
from .staffing import StaffingMinimum  # noqa: E402,F401
