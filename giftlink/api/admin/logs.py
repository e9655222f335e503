from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.admin.utils import int_filter, list_response, parse_filter
from giftlink.api.deps import require_role
from giftlink.core.database import get_session
from giftlink.models.app_log import AppLog
from giftlink.models.audit_log import AuditLog
from giftlink.schemas.admin.log import AppLogOut, AuditLogOut
from giftlink.utils.time import parse_timestamp

router = APIRouter(prefix="/admin/logs", tags=["admin"])


@router.get("", response_model=dict)
async def list_logs(
    skip: int = 0,
    limit: int = 50,
    sort: str = "created_at",
    order: str = "desc",
    filter: str | None = None,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> dict:
    filters = parse_filter(filter)
    query = select(AppLog)

    if "level" in filters:
        query = query.where(AppLog.level == filters["level"])
    if "event_type" in filters:
        query = query.where(AppLog.event_type == filters["event_type"])
    if "contains" in filters:
        query = query.where(AppLog.message.ilike(f"%{filters['contains']}%"))
    start = parse_timestamp(filters.get("from"))
    if start is not None:
        query = query.where(AppLog.created_at >= start)
    end = parse_timestamp(filters.get("to"))
    if end is not None:
        query = query.where(AppLog.created_at <= end)

    sort_col = getattr(AppLog, sort if sort in {"created_at", "level", "event_type"} else "created_at")
    if order.lower() == "desc":
        query = query.order_by(sort_col.desc(), AppLog.id.desc())
    else:
        query = query.order_by(sort_col.asc(), AppLog.id.asc())

    total = await session.scalar(select(func.count()).select_from(query.subquery()))
    result = await session.execute(query.offset(skip).limit(limit))
    items = [AppLogOut.model_validate(item) for item in result.scalars().all()]
    return list_response(items, total or 0)


@router.get("/audit", response_model=dict)
async def list_audit_logs(
    skip: int = 0,
    limit: int = 50,
    filter: str | None = None,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin")),
) -> dict:
    filters = parse_filter(filter)
    query = select(AuditLog)
    if "entity" in filters:
        query = query.where(AuditLog.entity == filters["entity"])
    entity_id = int_filter(filters, "entity_id")
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)
    query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

    total = await session.scalar(select(func.count()).select_from(query.subquery()))
    result = await session.execute(query.offset(skip).limit(limit))
    items = [AuditLogOut.model_validate(item) for item in result.scalars().all()]
    return list_response(items, total or 0)
