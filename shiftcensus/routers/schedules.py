from fastapi import APIRouter, Body, Depends, Query

from ..context import RequestContext
from ..dependencies import get_store, require_manager, require_org
from ..schemas.schedule import (
    BatchDetail,
    BatchRead,
    GenerateRequest,
    GenerateResponse,
    PublishResponse,
    SlotRead,
)
from ..services import schedule_runs
from ..services.store import ScheduleStore

router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_schedule(
    payload: GenerateRequest | None = Body(default=None),
    ctx: RequestContext = Depends(require_manager),
    store: ScheduleStore = Depends(get_store),
):
    payload = payload or GenerateRequest()
    outcome = schedule_runs.generate_schedule(
        store,
        ctx,
        department_id=payload.department_id,
        month=payload.month,
        schedule_type=payload.schedule_type,
    )
    return GenerateResponse(
        batch=BatchRead.model_validate(outcome.batch),
        run_id=outcome.run.id,
        slots_created=outcome.slots_created,
        note=outcome.note,
    )


@router.post("/publish/{batch_id}", response_model=PublishResponse)
async def publish_schedule(
    batch_id: str,
    ctx: RequestContext = Depends(require_manager),
    store: ScheduleStore = Depends(get_store),
):
    outcome = schedule_runs.publish_batch(store, ctx, batch_id)
    return PublishResponse(
        batch=BatchRead.model_validate(outcome.batch),
        shifts_upserted=outcome.shifts_upserted,
        note=outcome.note,
    )


@router.get("/batch/{batch_id}", response_model=BatchDetail)
async def read_batch(
    batch_id: str,
    ctx: RequestContext = Depends(require_org),
    store: ScheduleStore = Depends(get_store),
):
    batch, slots = schedule_runs.get_batch(store, ctx, batch_id)
    return BatchDetail(
        batch=BatchRead.model_validate(batch),
        slots=[SlotRead.model_validate(slot) for slot in slots],
    )


@router.get("/batches", response_model=list[BatchRead])
async def list_batches(
    department_id: int | None = Query(default=None),
    month: str | None = Query(default=None),
    ctx: RequestContext = Depends(require_org),
    store: ScheduleStore = Depends(get_store),
):
    batches = schedule_runs.list_batches(store, ctx, department_id=department_id, month=month)
    return [BatchRead.model_validate(batch) for batch in batches]
