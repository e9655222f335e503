from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.deps import get_lookup, get_request_ip
from giftlink.core.config import settings
from giftlink.core.database import get_session
from giftlink.schemas.address import AddressCheck, AddressSuggestion
from giftlink.schemas.admin.campaign import CampaignOut
from giftlink.schemas.claim import ClaimConfirmation, ClaimSubmission, OrderPayload, PublicCampaignOut
from giftlink.services.address_lookup import AddressLookup
from giftlink.services.campaign_config import shipping_violation
from giftlink.services.campaigns import get_active_campaign_by_slug
from giftlink.services.claim_form import (
    AGGREGATE_ERROR,
    ClaimForm,
    ClaimValidationError,
    offered_products,
)
from giftlink.services.claims import submit_claim
from giftlink.services.product_catalog import list_products
from giftlink.services.rate_limit import claim_limiter

router = APIRouter(prefix="/claim", tags=["claim"])


async def _campaign_or_404(session: AsyncSession, slug: str) -> CampaignOut:
    campaign = await get_active_campaign_by_slug(session, slug)
    if campaign is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


def _accepting_claims(campaign: CampaignOut) -> bool:
    limit = campaign.config.order_limit_per_link
    return limit is None or campaign.claims < limit


@router.get("/{slug}", response_model=PublicCampaignOut)
async def get_claim_page(
    slug: str,
    session: AsyncSession = Depends(get_session),
) -> PublicCampaignOut:
    campaign = await _campaign_or_404(session, slug)
    return PublicCampaignOut(
        slug=campaign.slug,
        name=campaign.name,
        welcome_message=campaign.welcome_message,
        brand_color=campaign.brand_color,
        brand_logo=campaign.brand_logo,
        claim_url=campaign.claim_url or "",
        accepting_claims=_accepting_claims(campaign),
        config=campaign.config,
        products=offered_products(campaign.config, list_products()),
    )


@router.get("/{slug}/addresses", response_model=list[AddressSuggestion])
async def search_addresses(
    slug: str,
    q: str = "",
    session: AsyncSession = Depends(get_session),
    lookup: AddressLookup = Depends(get_lookup),
) -> list[AddressSuggestion]:
    await _campaign_or_404(session, slug)
    if len(q.strip()) < settings.ADDRESS_SEARCH_MIN_CHARS:
        return []
    return await lookup.search_addresses(q)


@router.get("/{slug}/addresses/{address_id}", response_model=AddressCheck)
async def resolve_address(
    slug: str,
    address_id: str,
    session: AsyncSession = Depends(get_session),
    lookup: AddressLookup = Depends(get_lookup),
) -> AddressCheck:
    campaign = await _campaign_or_404(session, slug)
    address = await lookup.get_place_details(address_id)
    problem = shipping_violation(campaign.config, address.country)
    return AddressCheck(address=address, allowed=problem is None, error=problem)


@router.post("/{slug}", response_model=ClaimConfirmation)
async def submit(
    slug: str,
    submission: ClaimSubmission,
    request: Request,
    session: AsyncSession = Depends(get_session),
    lookup: AddressLookup = Depends(get_lookup),
) -> ClaimConfirmation:
    ip = await get_request_ip(request)
    if not claim_limiter.allow(f"{slug}:{ip or submission.email}"):
        raise HTTPException(status_code=429, detail="Too many claim attempts")

    campaign = await _campaign_or_404(session, slug)
    form = ClaimForm.from_submission(
        campaign.id, campaign.config, list_products(), submission, address_lookup=lookup
    )
    if form.selected_ids != list(dict.fromkeys(submission.product_ids)):
        raise ClaimValidationError(
            AGGREGATE_ERROR,
            {"items": "Your selection is not available or exceeds the campaign limits."},
        )
    if submission.address_id:
        await form.select_address(submission.address_id)

    async def _handler(payload: OrderPayload):
        return await submit_claim(session, campaign, payload)

    await form.submit(_handler)
    return ClaimConfirmation()
