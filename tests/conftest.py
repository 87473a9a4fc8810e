import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

from datetime import time  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftcensus.context import RequestContext  # noqa: E402
from shiftcensus.db import get_db  # noqa: E402
from shiftcensus.dependencies import get_request_context  # noqa: E402
from shiftcensus.main import app  # noqa: E402
from shiftcensus.models import Base, Department, Organization, ShiftPattern, StaffingMinimum  # noqa: E402
from shiftcensus.services.store import ScheduleStore  # noqa: E402

PACIFIC = "America/Los_Angeles"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(session):
    return ScheduleStore(session)


@pytest.fixture
def acme(session):
    """ACME org with department D1, pattern P1 (06:00-18:00 Pacific) and one Wednesday RN rule."""
    session.add(Organization(code="ACME", name="Acme Care Center", timezone=PACIFIC))
    session.add(Organization(code="OTHER", name="Other Facility", timezone="America/New_York"))
    session.flush()
    department = Department(org_code="ACME", name="D1")
    session.add(department)
    session.flush()
    pattern = ShiftPattern(
        org_code="ACME",
        department_id=department.id,
        name="P1",
        start_local=time(6, 0),
        end_local=time(18, 0),
        timezone=PACIFIC,
    )
    session.add(pattern)
    session.flush()
    rule = StaffingMinimum(
        org_code="ACME",
        department_id=department.id,
        role="RN",
        dow=3,
        min_count=1,
        shift_pattern_id=pattern.id,
    )
    session.add(rule)
    session.commit()
    return {"department": department, "pattern": pattern, "rule": rule}


@pytest.fixture
def admin_ctx():
    return RequestContext(user_id="admin-1", org_code="ACME", role="admin")


@pytest.fixture
def client_factory(session):
    def _build(ctx=None):
        def _get_db():
            yield session

        app.dependency_overrides[get_db] = _get_db
        if ctx is not None:
            app.dependency_overrides[get_request_context] = lambda: ctx
        else:
            app.dependency_overrides.pop(get_request_context, None)
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory, admin_ctx):
    return client_factory(admin_ctx)
