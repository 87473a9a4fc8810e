from datetime import time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import normalize_schedule_type
from ..services.time_windows import coerce_local_time, is_valid_timezone


class ShiftPatternBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    department_id: int | None = None
    start_local: time | None = None
    end_local: time | None = None
    timezone: str | None = None
    is_on_call: bool = False

    @field_validator("start_local", "end_local", mode="before")
    @classmethod
    def parse_time(cls, value):
        if value is None or value == "":
            return None
        parsed = coerce_local_time(value)
        if parsed is None:
            raise ValueError("Use HH:MM or HH:MM:SS")
        return parsed

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str | None) -> str | None:
        if value and not is_valid_timezone(value):
            raise ValueError("Unknown timezone")
        return value or None


class ShiftPatternCreate(ShiftPatternBase):
    pass


class ShiftPatternUpdate(ShiftPatternBase):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    is_on_call: bool | None = None


class ShiftPatternRead(BaseModel):
    id: int
    org_code: str
    department_id: int | None = None
    name: str
    start_local: time | None = None
    end_local: time | None = None
    timezone: str | None = None
    is_on_call: bool

    model_config = ConfigDict(from_attributes=True)


class StaffingMinimumBase(BaseModel):
    department_id: int
    unit_id: str | None = Field(default=None, max_length=64)
    role: str = Field(..., min_length=1, max_length=64)
    dow: int = Field(..., ge=0, le=6)
    min_count: int = Field(..., ge=0)
    shift_pattern_id: int | None = None
    schedule_type: str = "regular"

    @field_validator("schedule_type", mode="before")
    @classmethod
    def coerce_schedule_type(cls, value):
        return normalize_schedule_type(value)


class StaffingMinimumCreate(StaffingMinimumBase):
    pass


class StaffingMinimumUpdate(BaseModel):
    unit_id: str | None = Field(default=None, max_length=64)
    role: str | None = Field(default=None, min_length=1, max_length=64)
    dow: int | None = Field(default=None, ge=0, le=6)
    min_count: int | None = Field(default=None, ge=0)
    shift_pattern_id: int | None = None
    schedule_type: str | None = None

    @field_validator("schedule_type", mode="before")
    @classmethod
    def coerce_schedule_type(cls, value):
        return normalize_schedule_type(value) if value is not None else None


class StaffingMinimumRead(StaffingMinimumBase):
    id: int
    org_code: str

    model_config = ConfigDict(from_attributes=True)
