SCHEDULE_TYPE_REGULAR = "regular"
SCHEDULE_TYPE_ONCALL = "oncall"

BATCH_STATUS_DRAFT = "draft"
BATCH_STATUS_PUBLISHED = "published"

ROLE_SUPERADMIN = "superadmin"
MANAGER_ROLES = frozenset({ROLE_SUPERADMIN, "admin", "don", "ed"})

ORG_HEADER = "x-org-code"


def normalize_schedule_type(value: str | None) -> str:
    normalized = str(value or SCHEDULE_TYPE_REGULAR).strip().lower().replace("-", "").replace("_", "")
    return SCHEDULE_TYPE_ONCALL if normalized == SCHEDULE_TYPE_ONCALL else SCHEDULE_TYPE_REGULAR
