from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.admin.utils import list_response, parse_filter
from giftlink.api.deps import get_request_ip, require_role
from giftlink.core.database import get_session
from giftlink.schemas.admin.campaign import CampaignCreate, CampaignOut
from giftlink.services import campaigns as campaign_store
from giftlink.services.app_log_store import log_event
from giftlink.services.audit import record_audit
from giftlink.services.campaign_config import shipping_zones
from giftlink.services.product_catalog import unknown_product_ids

router = APIRouter(prefix="/admin/campaigns", tags=["admin"])


@router.get("", response_model=dict)
async def list_campaigns(
    skip: int = 0,
    limit: int = 25,
    sort: str = "created_at",
    order: str = "desc",
    filter: str | None = None,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> dict:
    filters = parse_filter(filter)
    items, total = await campaign_store.list_campaigns(
        session,
        status=filters.get("status"),
        q=filters.get("q"),
        sort=sort,
        order=order,
        skip=skip,
        limit=limit,
    )
    return list_response(items, total)


@router.get("/{campaign_id}", response_model=CampaignOut)
async def get_campaign(
    campaign_id: int,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> CampaignOut:
    campaign = await campaign_store.get_campaign(session, campaign_id)
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


@router.post("", response_model=CampaignOut)
async def create_campaign(
    payload: CampaignCreate,
    request: Request,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> CampaignOut:
    unknown = unknown_product_ids(payload.config.selected_product_ids)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown products: {', '.join(unknown)}")
    zones = {zone.lower() for zone in shipping_zones()}
    if payload.config.shipping_zone.strip().lower() not in zones:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported shipping zone: {payload.config.shipping_zone}",
        )

    campaign = await campaign_store.create_campaign(session, payload)
    await record_audit(
        session,
        admin_id=admin.id,
        entity="campaigns",
        action="create",
        before=None,
        after=campaign,
        ip=await get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
        entity_id=campaign.id,
    )
    return campaign


@router.post("/{campaign_id}/archive", response_model=CampaignOut)
async def archive_campaign(
    campaign_id: int,
    request: Request,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> CampaignOut:
    before = await campaign_store.get_campaign(session, campaign_id)
    if not before:
        raise HTTPException(status_code=404, detail="Campaign not found")

    campaign = await campaign_store.archive_campaign(session, campaign_id)
    await record_audit(
        session,
        admin_id=admin.id,
        entity="campaigns",
        action="archive",
        before=before,
        after=campaign,
        ip=await get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
        entity_id=campaign_id,
    )
    await log_event(
        session,
        "info",
        "campaign_archived",
        f"Campaign {before.slug} archived",
        {"campaign_id": campaign_id, "admin_id": admin.id},
    )
    return campaign
