from __future__ import annotations

from dataclasses import dataclass

from .constants import MANAGER_ROLES, ROLE_SUPERADMIN


@dataclass(frozen=True)
class RequestContext:
    """Tenant and caller identity that accompanies every scheduling call."""

    user_id: str | None
    org_code: str | None
    role: str = "member"

    @property
    def is_superadmin(self) -> bool:
        return self.role == ROLE_SUPERADMIN

    @property
    def can_manage(self) -> bool:
        return self.role in MANAGER_ROLES

    def can_access(self, org_code: str | None) -> bool:
        return self.is_superadmin or (org_code is not None and org_code == self.org_code)
