from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.schemas.admin.campaign import CampaignOut
from giftlink.schemas.campaign_config import SHIP_ANYWHERE
from giftlink.schemas.claim import ClaimResult, OrderPayload
from giftlink.services.app_log_store import log_event
from giftlink.services.campaign_config import restricted_country_list, shipping_violation
from giftlink.services.campaigns import increment_claims
from giftlink.services.claim_form import (
    AGGREGATE_ERROR,
    ClaimRejectedError,
    ClaimValidationError,
    validate_submission,
)
from giftlink.services.duplicates import find_duplicate_order, identity_of, log_duplicate_attempt
from giftlink.services.orders import create_order
from giftlink.services.product_catalog import get_product

logger = structlog.get_logger(__name__)

CLOSED_MESSAGE = "This campaign is no longer accepting claims."
LIMIT_REACHED_MESSAGE = "This campaign has reached its claim limit."
SELECT_ADDRESS_MESSAGE = "Select an address from the suggestions so we can confirm shipping."


def _payload_values(payload: OrderPayload) -> dict[str, object]:
    return {
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "email": payload.email,
        "phone": payload.phone,
        "instagram": payload.instagram,
        "tiktok": payload.tiktok,
        "address": payload.address,
        "custom_answer": payload.custom_answer,
        "consent_primary": payload.consent_primary,
        "consent_secondary": payload.consent_secondary,
        "marketing_opt_in": payload.marketing_opt_in,
    }


def _shipping_errors(campaign: CampaignOut, payload: OrderPayload) -> dict[str, str]:
    config = campaign.config
    details = payload.shipping_details
    if details is None:
        restricted = config.shipping_zone.strip().lower() != SHIP_ANYWHERE.lower()
        if restricted or restricted_country_list(config):
            return {"address": SELECT_ADDRESS_MESSAGE}
        return {}
    problem = shipping_violation(config, details.country)
    return {"address": problem} if problem else {}


def _item_errors(campaign: CampaignOut, payload: OrderPayload) -> dict[str, str]:
    config = campaign.config
    ids = [item.id for item in payload.items]
    if not ids:
        return {"items": "Select at least one product."}
    if len(set(ids)) != len(ids):
        return {"items": "Each product can only be selected once."}
    offered = set(config.selected_product_ids)
    total = 0.0
    for item in payload.items:
        product = get_product(item.id)
        if product is None or item.id not in offered:
            return {"items": f"Product {item.id} is not available in this campaign."}
        total += product.price
    if len(ids) > config.item_limit:
        return {"items": f"You can select up to {config.item_limit} item(s)."}
    if config.max_cart_value is not None and total > config.max_cart_value:
        return {"items": "Your selection exceeds the maximum cart value."}
    return {}


async def submit_claim(
    session: AsyncSession, campaign: CampaignOut, payload: OrderPayload
) -> ClaimResult:
    if campaign.status != "active":
        raise ClaimRejectedError(CLOSED_MESSAGE)
    if payload.campaign_id != campaign.id:
        raise ClaimRejectedError("Claim does not belong to this campaign.")

    config = campaign.config
    errors = validate_submission(config, _payload_values(payload))
    for extra in (_shipping_errors(campaign, payload), _item_errors(campaign, payload)):
        for name, message in extra.items():
            errors.setdefault(name, message)
    if errors:
        raise ClaimValidationError(AGGREGATE_ERROR, errors)

    if config.order_limit_per_link is not None and campaign.claims >= config.order_limit_per_link:
        raise ClaimRejectedError(LIMIT_REACHED_MESSAGE)

    identity = identity_of(payload)
    existing_order_id = await find_duplicate_order(session, campaign.id, identity)
    if existing_order_id is not None:
        if config.block_duplicate_orders:
            attempt = await log_duplicate_attempt(session, campaign.id, payload)
            await log_event(
                session,
                "warning",
                "duplicate_attempt",
                f"Duplicate claim filed for campaign {campaign.slug}",
                {
                    "campaign_id": campaign.id,
                    "attempt_id": attempt.id,
                    "order_id": existing_order_id,
                },
            )
            return ClaimResult(outcome="duplicate", attempt_id=attempt.id)
        await log_event(
            session,
            "info",
            "duplicate_match",
            f"Claim matches an existing order for campaign {campaign.slug}",
            {"campaign_id": campaign.id, "order_id": existing_order_id},
        )

    order = await create_order(session, payload)
    # two sequential writes, the counter can lag the orders table on failure
    await increment_claims(session, campaign.id)
    logger.info("claim_created", campaign_id=campaign.id, order_id=order.id)
    return ClaimResult(outcome="created", order_id=order.id)
