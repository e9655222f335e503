from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.admin.utils import int_filter, list_response, parse_filter
from giftlink.api.deps import require_role
from giftlink.core.database import get_session
from giftlink.schemas.admin.order import OrderOut
from giftlink.services import orders as order_store
from giftlink.utils.time import parse_timestamp

router = APIRouter(prefix="/admin/orders", tags=["admin"])


@router.get("", response_model=dict)
async def list_orders(
    skip: int = 0,
    limit: int = 50,
    sort: str = "created_at",
    order: str = "desc",
    filter: str | None = None,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> dict:
    filters = parse_filter(filter)
    items, total = await order_store.list_orders(
        session,
        status=filters.get("status"),
        campaign_id=int_filter(filters, "campaign_id"),
        q=filters.get("q"),
        created_from=parse_timestamp(filters.get("from")),
        created_to=parse_timestamp(filters.get("to")),
        sort=sort,
        order=order,
        skip=skip,
        limit=limit,
    )
    return list_response(items, total)


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: int,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> OrderOut:
    order = await order_store.get_order(session, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
