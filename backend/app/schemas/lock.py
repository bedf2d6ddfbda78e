from datetime import datetime

from pydantic import BaseModel


class LockStateOut(BaseModel):
    scope: str
    locked: bool
    locked_at: datetime | None = None
    locked_by: str | None = None


class LockTransitionOut(LockStateOut):
    changed: bool
    warnings: list[str] = []
    message: str
