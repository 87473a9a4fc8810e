"""Seed the ACME demo facility with a nursing department, patterns and staffing minimums."""

from datetime import time

from shiftcensus.db import SessionLocal
from shiftcensus.models import Department, Organization, ShiftPattern, StaffingMinimum

ORG_CODE = "ACME"
TIMEZONE = "America/Los_Angeles"


def ensure_org(session) -> Organization:
    org = session.query(Organization).filter(Organization.code == ORG_CODE).one_or_none()
    if org is None:
        org = Organization(code=ORG_CODE, name="Acme Care Center", timezone=TIMEZONE)
        session.add(org)
        session.flush()
    return org


def ensure_department(session, org: Organization, name: str) -> Department:
    department = (
        session.query(Department)
        .filter(Department.org_code == org.code, Department.name == name)
        .one_or_none()
    )
    if department is None:
        department = Department(org_code=org.code, name=name)
        session.add(department)
        session.flush()
    return department


def ensure_pattern(session, department: Department, name: str, start: time, end: time) -> ShiftPattern:
    pattern = (
        session.query(ShiftPattern)
        .filter(ShiftPattern.department_id == department.id, ShiftPattern.name == name)
        .one_or_none()
    )
    if pattern is None:
        pattern = ShiftPattern(
            org_code=department.org_code,
            department_id=department.id,
            name=name,
            start_local=start,
            end_local=end,
            timezone=TIMEZONE,
        )
        session.add(pattern)
        session.flush()
    return pattern


def ensure_minimum(session, department: Department, pattern: ShiftPattern, role: str, dow: int, count: int) -> None:
    existing = (
        session.query(StaffingMinimum)
        .filter(
            StaffingMinimum.department_id == department.id,
            StaffingMinimum.shift_pattern_id == pattern.id,
            StaffingMinimum.role == role,
            StaffingMinimum.dow == dow,
        )
        .one_or_none()
    )
    if existing:
        existing.min_count = count
        return
    session.add(
        StaffingMinimum(
            org_code=department.org_code,
            department_id=department.id,
            unit_id="North",
            role=role,
            dow=dow,
            min_count=count,
            shift_pattern_id=pattern.id,
        )
    )


def main() -> None:
    session = SessionLocal()
    try:
        org = ensure_org(session)
        nursing = ensure_department(session, org, "Nursing")
        day = ensure_pattern(session, nursing, "Day 6-6", time(6, 0), time(18, 0))
        night = ensure_pattern(session, nursing, "Night 6-6", time(18, 0), time(6, 0))
        for dow in range(7):
            ensure_minimum(session, nursing, day, "RN", dow, 2)
            ensure_minimum(session, nursing, day, "CNA", dow, 3)
            ensure_minimum(session, nursing, night, "RN", dow, 1)
        session.commit()
        print("Demo data ready:")
        print(f"  Org: {org.code} ({org.name})")
        print(f"  Department id: {nursing.id}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
