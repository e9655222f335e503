from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.models.campaign import Campaign
from giftlink.models.order import Order
from giftlink.schemas.admin.order import OrderOut
from giftlink.schemas.claim import OrderPayload
from giftlink.services.gateway import order_from_row, order_to_row, persistence_guard, row_as_dict

ORDER_SORT_COLUMNS = {"created_at", "status", "influencer_email", "influencer_name"}


async def create_order(
    session: AsyncSession, payload: OrderPayload, *, commit: bool = True
) -> Order:
    order = Order(**order_to_row(payload))
    async with persistence_guard(session, "create_order"):
        session.add(order)
        await session.flush()
        if commit:
            await session.commit()
            await session.refresh(order)
    return order


async def list_orders(
    session: AsyncSession,
    *,
    status: str | None = None,
    campaign_id: int | None = None,
    q: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    sort: str = "created_at",
    order: str = "desc",
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[OrderOut], int]:
    query = select(Order, Campaign.name).outerjoin(Campaign, Campaign.id == Order.campaign_id)
    if status:
        query = query.where(Order.status == status)
    if campaign_id is not None:
        query = query.where(Order.campaign_id == campaign_id)
    if q:
        pattern = f"%{q}%"
        query = query.where(
            or_(
                Order.influencer_email.ilike(pattern),
                Order.influencer_name.ilike(pattern),
                Order.influencer_handle_instagram.ilike(pattern),
                Order.influencer_handle_tiktok.ilike(pattern),
            )
        )
    if created_from is not None:
        query = query.where(Order.created_at >= created_from)
    if created_to is not None:
        query = query.where(Order.created_at <= created_to)

    descending = order.lower() == "desc"
    by_value = sort == "value"
    if not by_value:
        sort_col = getattr(Order, sort if sort in ORDER_SORT_COLUMNS else "created_at")
        if descending:
            query = query.order_by(sort_col.desc(), Order.id.desc())
        else:
            query = query.order_by(sort_col.asc(), Order.id.asc())

    async with persistence_guard(session, "list_orders"):
        total = await session.scalar(select(func.count()).select_from(query.subquery()))
        if by_value:
            result = await session.execute(query)
        else:
            result = await session.execute(query.offset(skip).limit(limit))
        rows = result.all()

    items = [order_from_row(row_as_dict(record), campaign_name) for record, campaign_name in rows]
    if by_value:
        items.sort(key=lambda item: (item.value, item.id), reverse=descending)
        items = items[skip : skip + limit]
    return items, total or 0


async def get_order(session: AsyncSession, order_id: int) -> OrderOut | None:
    query = (
        select(Order, Campaign.name)
        .outerjoin(Campaign, Campaign.id == Order.campaign_id)
        .where(Order.id == order_id)
    )
    async with persistence_guard(session, "get_order"):
        row = (await session.execute(query)).first()
    if row is None:
        return None
    record, campaign_name = row
    return order_from_row(row_as_dict(record), campaign_name)


async def count_orders_for_campaign(session: AsyncSession, campaign_id: int) -> int:
    async with persistence_guard(session, "count_orders"):
        total = await session.scalar(
            select(func.count()).select_from(Order).where(Order.campaign_id == campaign_id)
        )
    return total or 0
