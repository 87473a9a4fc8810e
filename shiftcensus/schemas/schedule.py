from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_serializer

from ..services.time_windows import iso_utc


class GenerateRequest(BaseModel):
    # Left optional so missing values surface as 400s from the service layer.
    month: str | None = None
    department_id: int | str | None = None
    schedule_type: str | None = None


class BatchRead(BaseModel):
    id: int
    org_code: str
    department_id: int
    schedule_type: str
    month_key: str
    status: str
    created_by: str | None = None
    created_at: datetime | None = None
    published_at: datetime | None = None
    published_by: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "published_at")
    def serialize_utc(self, value: datetime | None) -> str | None:
        return iso_utc(value)


class SlotRead(BaseModel):
    id: int
    batch_id: int
    slot_date: date
    template_id: int | None = None
    staffing_minimum_id: int | None = None
    unit_id: str | None = None
    role: str
    position_no: int
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None
    assigned_staff_id: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_time", "end_time")
    def serialize_utc(self, value: datetime | None) -> str | None:
        return iso_utc(value)


class GenerateResponse(BaseModel):
    ok: bool = True
    batch: BatchRead
    run_id: int
    slots_created: int
    note: str | None = None


class PublishResponse(BaseModel):
    ok: bool = True
    batch: BatchRead
    shifts_upserted: int
    note: str | None = None


class BatchDetail(BaseModel):
    batch: BatchRead
    slots: list[SlotRead]
