from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AppLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    level: str
    event_type: str
    message: str | None = None
    data: dict[str, Any] | None = None
    created_at: datetime | None = None


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    admin_id: int | None = None
    entity: str
    entity_id: int | None = None
    action: str
    before_json: dict[str, Any] | None = None
    after_json: dict[str, Any] | None = None
    ip: str | None = None
    created_at: datetime | None = None
