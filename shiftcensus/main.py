import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .config import get_settings
from .errors import ScheduleError
from .migration_runner import run_migrations_once
from .routers import departments, schedules, shift_patterns, staffing_minimums

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, session_cookie=settings.session_cookie)


@app.exception_handler(ScheduleError)
async def schedule_error_handler(request: Request, exc: ScheduleError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.on_event("startup")
async def ensure_schema() -> None:
    if not settings.run_migrations_on_startup:
        return
    try:
        run_migrations_once()
    except Exception:  # pragma: no cover - startup failures should surface
        logger.exception("Database migration failed")
        raise


app.include_router(departments.router)
app.include_router(shift_patterns.router)
app.include_router(staffing_minimums.router)
app.include_router(schedules.router)
