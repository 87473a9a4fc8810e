from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .constants import ORG_HEADER
from .context import RequestContext
from .db import get_db
from .services.store import ScheduleStore


def get_request_context(request: Request) -> RequestContext:
    """Build the caller context from the signed session and the org header.

    The session is populated by the hosted sign-in flow; this service only reads it.
    """
    session_user = request.session.get("user")
    if not session_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    org_code = request.headers.get(ORG_HEADER) or session_user.get("org_code")
    return RequestContext(
        user_id=str(session_user["id"]) if session_user.get("id") is not None else None,
        org_code=org_code.strip() if org_code else None,
        role=str(session_user.get("role") or "member").lower(),
    )


def require_org(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not ctx.org_code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing org context")
    return ctx


def require_manager(ctx: RequestContext = Depends(require_org)) -> RequestContext:
    if not ctx.can_manage:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return ctx


def get_store(db: Session = Depends(get_db)) -> ScheduleStore:
    return ScheduleStore(db)
