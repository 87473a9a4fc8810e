from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..context import RequestContext
from ..db import get_db
from ..dependencies import require_manager, require_org
from ..models import Department, ShiftPattern
from ..schemas.staffing import ShiftPatternCreate, ShiftPatternRead, ShiftPatternUpdate

router = APIRouter(prefix="/api/shift-patterns", tags=["shift-patterns"])


def _get_owned_pattern(db: Session, ctx: RequestContext, pattern_id: int) -> ShiftPattern:
    pattern = (
        db.query(ShiftPattern)
        .filter(ShiftPattern.id == pattern_id, ShiftPattern.org_code == ctx.org_code)
        .one_or_none()
    )
    if not pattern:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift pattern not found")
    return pattern


def _check_department(db: Session, ctx: RequestContext, department_id: int | None) -> None:
    if department_id is None:
        return
    exists = (
        db.query(Department.id)
        .filter(Department.id == department_id, Department.org_code == ctx.org_code)
        .first()
    )
    if not exists:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid department_id")


@router.get("", response_model=list[ShiftPatternRead])
async def list_patterns(
    department_id: int | None = None,
    ctx: RequestContext = Depends(require_org),
    db: Session = Depends(get_db),
):
    query = db.query(ShiftPattern).filter(ShiftPattern.org_code == ctx.org_code)
    if department_id is not None:
        query = query.filter(ShiftPattern.department_id == department_id)
    return query.order_by(ShiftPattern.start_local, ShiftPattern.name).all()


@router.post("", response_model=ShiftPatternRead)
async def create_pattern(
    payload: ShiftPatternCreate,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    _check_department(db, ctx, payload.department_id)
    pattern = ShiftPattern(org_code=ctx.org_code, **payload.model_dump())
    db.add(pattern)
    db.commit()
    return pattern


@router.patch("/{pattern_id}", response_model=ShiftPatternRead)
async def update_pattern(
    pattern_id: int,
    payload: ShiftPatternUpdate,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    pattern = _get_owned_pattern(db, ctx, pattern_id)
    changes = payload.model_dump(exclude_unset=True)
    if "department_id" in changes:
        _check_department(db, ctx, changes["department_id"])
    for field, value in changes.items():
        setattr(pattern, field, value)
    db.commit()
    return pattern


@router.delete("/{pattern_id}")
async def delete_pattern(
    pattern_id: int,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    pattern = _get_owned_pattern(db, ctx, pattern_id)
    db.delete(pattern)
    db.commit()
    return {"success": True}
