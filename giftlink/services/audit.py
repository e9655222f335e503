from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.models.audit_log import AuditLog


def _serialize(value: object) -> object:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(val) for key, val in value.items()}
    return value


def _snapshot(value: object | None) -> dict | None:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return _serialize(value)
    return {"value": _serialize(value)}


async def record_audit(
    session: AsyncSession,
    admin_id: int | None,
    entity: str,
    action: str,
    before: object | None,
    after: object | None,
    ip: str | None = None,
    user_agent: str | None = None,
    entity_id: int | None = None,
) -> None:
    session.add(
        AuditLog(
            admin_id=admin_id,
            entity=entity,
            entity_id=entity_id,
            action=action,
            before_json=_snapshot(before),
            after_json=_snapshot(after),
            ip=ip,
            user_agent=user_agent,
        )
    )
    await session.commit()
