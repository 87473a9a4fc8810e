from datetime import datetime

from pydantic import BaseModel, ConfigDict, constr


class DepartmentCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=120)


class DepartmentRead(BaseModel):
    id: int
    org_code: str
    name: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
