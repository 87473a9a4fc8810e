from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..context import RequestContext
from ..db import get_db
from ..dependencies import require_manager, require_org
from ..models import Department
from ..schemas.department import DepartmentCreate, DepartmentRead

router = APIRouter(prefix="/api/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentRead])
async def list_departments(ctx: RequestContext = Depends(require_org), db: Session = Depends(get_db)):
    return (
        db.query(Department)
        .filter(Department.org_code == ctx.org_code)
        .order_by(Department.name)
        .all()
    )


@router.post("", response_model=DepartmentRead)
async def create_department(
    payload: DepartmentCreate,
    ctx: RequestContext = Depends(require_manager),
    db: Session = Depends(get_db),
):
    department = Department(org_code=ctx.org_code, name=payload.name)
    db.add(department)
    db.commit()
    return department
