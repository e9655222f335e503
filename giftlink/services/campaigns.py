from __future__ import annotations

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.models.campaign import Campaign
from giftlink.schemas.admin.campaign import CampaignCreate, CampaignOut
from giftlink.services.gateway import (
    PersistenceError,
    campaign_from_row,
    campaign_to_row,
    persistence_guard,
    row_as_dict,
)
from giftlink.utils.slug import generate_slug

SLUG_ATTEMPTS = 5
CAMPAIGN_SORT_COLUMNS = {"created_at", "name", "claims", "status"}


async def _slug_taken(session: AsyncSession, slug: str) -> bool:
    existing = await session.scalar(select(Campaign.id).where(Campaign.slug == slug))
    return existing is not None


async def unique_slug(session: AsyncSession, name: str) -> str:
    for _ in range(SLUG_ATTEMPTS):
        slug = generate_slug(name)
        if not await _slug_taken(session, slug):
            return slug
    raise PersistenceError("Could not allocate a unique campaign slug")


async def create_campaign(session: AsyncSession, payload: CampaignCreate) -> CampaignOut:
    async with persistence_guard(session, "create_campaign"):
        slug = await unique_slug(session, payload.name)
        campaign = Campaign(**campaign_to_row(payload, slug))
        session.add(campaign)
        await session.commit()
        await session.refresh(campaign)
    return campaign_from_row(row_as_dict(campaign))


async def list_campaigns(
    session: AsyncSession,
    *,
    status: str | None = None,
    q: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
    skip: int = 0,
    limit: int = 25,
) -> tuple[list[CampaignOut], int]:
    query = select(Campaign)
    if status:
        query = query.where(Campaign.status == status)
    if q:
        pattern = f"%{q}%"
        query = query.where(or_(Campaign.name.ilike(pattern), Campaign.slug.ilike(pattern)))

    sort_col = getattr(Campaign, sort if sort in CAMPAIGN_SORT_COLUMNS else "created_at")
    if order.lower() == "desc":
        query = query.order_by(sort_col.desc(), Campaign.id.desc())
    else:
        query = query.order_by(sort_col.asc(), Campaign.id.asc())

    async with persistence_guard(session, "list_campaigns"):
        total = await session.scalar(select(func.count()).select_from(query.subquery()))
        result = await session.execute(query.offset(skip).limit(limit))
        records = result.scalars().all()
    return [campaign_from_row(row_as_dict(record)) for record in records], total or 0


async def get_campaign(session: AsyncSession, campaign_id: int) -> CampaignOut | None:
    async with persistence_guard(session, "get_campaign"):
        campaign = await session.get(Campaign, campaign_id, populate_existing=True)
    if campaign is None:
        return None
    return campaign_from_row(row_as_dict(campaign))


async def get_active_campaign_by_slug(session: AsyncSession, slug: str) -> CampaignOut | None:
    query = (
        select(Campaign)
        .where(Campaign.slug == slug)
        .where(Campaign.status == "active")
        .limit(1)
        .execution_options(populate_existing=True)
    )
    async with persistence_guard(session, "get_campaign_by_slug"):
        result = await session.execute(query)
        campaign = result.scalars().first()
    if campaign is None:
        return None
    return campaign_from_row(row_as_dict(campaign))


async def archive_campaign(session: AsyncSession, campaign_id: int) -> CampaignOut | None:
    async with persistence_guard(session, "archive_campaign"):
        campaign = await session.get(Campaign, campaign_id, populate_existing=True)
        if campaign is None:
            return None
        campaign.status = "archived"
        await session.commit()
        await session.refresh(campaign)
    return campaign_from_row(row_as_dict(campaign))


async def increment_claims(session: AsyncSession, campaign_id: int) -> None:
    async with persistence_guard(session, "increment_claims"):
        await session.execute(
            update(Campaign)
            .where(Campaign.id == campaign_id)
            .values(claims=Campaign.claims + 1)
        )
        await session.commit()
