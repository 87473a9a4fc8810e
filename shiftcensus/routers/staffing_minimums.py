from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..context import RequestContext
from ..db import get_db
from ..dependencies import require_manager, require_org
from ..models import Department, ShiftPattern, StaffingMinimum
from ..schemas.staffing import StaffingMinimumCreate, StaffingMinimumRead, StaffingMinimumUpdate

router = APIRouter(prefix="/api/staffing-minimums", tags=["staffing-minimums"])


def _get_owned_rule(db: Session, ctx: RequestContext, rule_id: int) -> StaffingMinimum:
    rule = (
        db.query(StaffingMinimum)
        .filter(StaffingMinimum.id == rule_id, StaffingMinimum.org_code == ctx.org_code)
        .one_or_none()
    )
    if not rule:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staffing minimum not found")
    return rule


def _check_references(db: Session, ctx: RequestContext, department_id: int | None, pattern_id: int | None) -> None:
    if department_id is not None:
        department = (
            db.query(Department.id)
            .filter(Department.id == department_id, Department.org_code == ctx.org_code)
            .first()
        )
        if not department:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid department_id")
    if pattern_id is not None:
        pattern = (
            db.query(ShiftPattern.id)
            .filter(ShiftPattern.id == pattern_id, ShiftPattern.org_code == ctx.org_code)
            .first()
        )
        if not pattern:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid shift_pattern_id")


@router.get("", response_model=list[StaffingMinimumRead])
async def list_rules(
    department_id: int | None = None,
    schedule_type: str | None = None,
    ctx: RequestContext = Depends(require_org),
    db: Session = Depends(get_db),
):
    query = db.query(StaffingMinimum).filter(StaffingMinimum.org_code == ctx.org_code)
    if department_id is not None:
        query = query.filter(StaffingMinimum.department_id == department_id)
    if schedule_type:
        query = query.filter(StaffingMinimum.schedule_type == schedule_type.lower())
    return query.order_by(StaffingMinimum.dow, StaffingMinimum.role, StaffingMinimum.id).all()


@router.post("", response_model=StaffingMinimumRead)
async def create_rule(
    payload: StaffingMinimumCreate,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    _check_references(db, ctx, payload.department_id, payload.shift_pattern_id)
    rule = StaffingMinimum(org_code=ctx.org_code, **payload.model_dump())
    db.add(rule)
    db.commit()
    return rule


@router.patch("/{rule_id}", response_model=StaffingMinimumRead)
async def update_rule(
    rule_id: int,
    payload: StaffingMinimumUpdate,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    rule = _get_owned_rule(db, ctx, rule_id)
    changes = payload.model_dump(exclude_unset=True)
    _check_references(db, ctx, None, changes.get("shift_pattern_id"))
    for field, value in changes.items():
        if value is None and field in {"role", "dow", "min_count", "schedule_type"}:
            continue
        setattr(rule, field, value)
    db.commit()
    return rule


@router.delete("/{rule_id}")
async def delete_rule(
    rule_id: int,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    rule = _get_owned_rule(db, ctx, rule_id)
    db.delete(rule)
    db.commit()
    return {"success": True}
