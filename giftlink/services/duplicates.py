from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.core.config import settings
from giftlink.models.campaign import Campaign
from giftlink.models.duplicate_attempt import DuplicateAttempt
from giftlink.models.order import Order
from giftlink.schemas.address import ResolvedAddress
from giftlink.schemas.admin.duplicate import DuplicateAttemptOut
from giftlink.schemas.admin.order import OrderOut
from giftlink.schemas.claim import OrderPayload
from giftlink.services.campaigns import increment_claims
from giftlink.services.gateway import (
    DEFAULT_DUPLICATE_REASON,
    DUPLICATE_DECISIONS,
    duplicate_from_row,
    order_from_row,
    order_item_from_raw,
    parse_items,
    parse_json_object,
    persistence_guard,
    row_as_dict,
)
from giftlink.services.orders import create_order

logger = structlog.get_logger(__name__)

IDENTITY_COLUMNS = {
    "email": Order.influencer_email,
    "phone": Order.influencer_phone,
    "instagram": Order.influencer_handle_instagram,
    "tiktok": Order.influencer_handle_tiktok,
}


class DuplicateResolutionError(Exception):
    pass


class DuplicateAttemptNotFoundError(DuplicateResolutionError):
    pass


def identity_of(payload: OrderPayload) -> dict[str, str]:
    values = {
        "email": payload.email,
        "phone": payload.phone,
        "instagram": payload.instagram,
        "tiktok": payload.tiktok,
    }
    return {key: value.strip() for key, value in values.items() if value and value.strip()}


def _identity_clauses(identity: dict[str, str], case_insensitive: bool) -> list:
    clauses = []
    for key, value in identity.items():
        column = IDENTITY_COLUMNS.get(key)
        if column is None or not value:
            continue
        if case_insensitive:
            clauses.append(func.lower(column) == value.lower())
        else:
            clauses.append(column == value)
    return clauses


async def find_duplicate_order(
    session: AsyncSession,
    campaign_id: int,
    identity: dict[str, str],
    *,
    scope: str | None = None,
    case_insensitive: bool | None = None,
) -> int | None:
    scope = (scope or settings.DUPLICATE_MATCH_SCOPE).lower()
    if case_insensitive is None:
        case_insensitive = settings.DUPLICATE_MATCH_CASE_INSENSITIVE
    clauses = _identity_clauses(identity, case_insensitive)
    if not clauses:
        return None

    query = select(Order.id).where(or_(*clauses))
    if scope != "global":
        query = query.where(Order.campaign_id == campaign_id)
    async with persistence_guard(session, "find_duplicate_order"):
        return await session.scalar(query.limit(1))


async def log_duplicate_attempt(
    session: AsyncSession,
    campaign_id: int,
    influencer_info: OrderPayload | dict[str, Any],
    reason: str = DEFAULT_DUPLICATE_REASON,
) -> DuplicateAttemptOut:
    if isinstance(influencer_info, OrderPayload):
        info = influencer_info.model_dump(mode="json")
    else:
        info = dict(influencer_info)
    info["decision"] = info.get("decision") or "pending"

    attempt = DuplicateAttempt(campaign_id=campaign_id, influencer_info=info, reason=reason)
    async with persistence_guard(session, "log_duplicate_attempt"):
        session.add(attempt)
        await session.commit()
        await session.refresh(attempt)
    return duplicate_from_row(row_as_dict(attempt))


async def list_duplicate_attempts(
    session: AsyncSession,
    *,
    campaign_id: int | None = None,
    decision: str | None = None,
    order: str = "desc",
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[DuplicateAttemptOut], int]:
    query = select(DuplicateAttempt, Campaign.name).outerjoin(
        Campaign, Campaign.id == DuplicateAttempt.campaign_id
    )
    if campaign_id is not None:
        query = query.where(DuplicateAttempt.campaign_id == campaign_id)
    if order.lower() == "desc":
        query = query.order_by(DuplicateAttempt.created_at.desc(), DuplicateAttempt.id.desc())
    else:
        query = query.order_by(DuplicateAttempt.created_at.asc(), DuplicateAttempt.id.asc())

    if not decision:
        count_query = select(func.count()).select_from(DuplicateAttempt)
        if campaign_id is not None:
            count_query = count_query.where(DuplicateAttempt.campaign_id == campaign_id)
        async with persistence_guard(session, "list_duplicate_attempts"):
            total = await session.scalar(count_query) or 0
            rows = (await session.execute(query.offset(skip).limit(limit))).all()
        return [duplicate_from_row(row_as_dict(record), name) for record, name in rows], total

    # decision lives inside the stored payload JSON
    async with persistence_guard(session, "list_duplicate_attempts"):
        rows = (await session.execute(query)).all()
    items = [duplicate_from_row(row_as_dict(record), name) for record, name in rows]
    items = [item for item in items if item.decision == decision]
    return items[skip : skip + limit], len(items)


async def _load_attempt(session: AsyncSession, attempt_id: int) -> DuplicateAttempt:
    async with persistence_guard(session, "load_duplicate_attempt"):
        attempt = await session.get(DuplicateAttempt, attempt_id)
    if attempt is None:
        raise DuplicateAttemptNotFoundError(f"Duplicate attempt {attempt_id} not found")
    return attempt


def _split_name(info: dict[str, Any]) -> tuple[str, str]:
    first = info.get("first_name") or info.get("firstName")
    last = info.get("last_name") or info.get("lastName")
    if first or last:
        return str(first or ""), str(last or "")
    parts = str(info.get("name") or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _bool_or(value: Any, default: bool) -> bool:
    return default if value is None else bool(value)


def _shipping_from_info(info: dict[str, Any]) -> tuple[ResolvedAddress | None, str]:
    shipping = info.get("shipping_details") or info.get("shippingDetails")
    address = str(info.get("address") or "")
    if isinstance(shipping, str):
        return None, address or shipping
    if not isinstance(shipping, dict):
        return None, address
    try:
        return ResolvedAddress.model_validate(shipping), address
    except ValidationError:
        text = ", ".join(str(value) for value in shipping.values() if value not in (None, ""))
        return None, address or text


def order_payload_from_info(campaign_id: int, info: dict[str, Any]) -> OrderPayload:
    first_name, last_name = _split_name(info)
    shipping, address = _shipping_from_info(info)
    primary = info.get("consent_primary", info.get("consentPrimary"))
    secondary = info.get("consent_secondary", info.get("consentSecondary"))
    return OrderPayload(
        campaign_id=campaign_id,
        first_name=first_name,
        last_name=last_name,
        email=str(info.get("email") or ""),
        phone=info.get("phone") or None,
        instagram=info.get("instagram") or None,
        tiktok=info.get("tiktok") or None,
        address=address,
        shipping_details=shipping,
        items=[order_item_from_raw(item) for item in parse_items(info.get("items"))],
        custom_answer=info.get("custom_answer") or None,
        consent_primary=_bool_or(primary, True),
        consent_secondary=_bool_or(secondary, False),
        marketing_opt_in=_bool_or(info.get("marketing_opt_in"), False),
    )


async def accept_duplicate_attempt(session: AsyncSession, attempt_id: int) -> OrderOut:
    attempt = await _load_attempt(session, attempt_id)
    if attempt.campaign_id is None:
        raise DuplicateResolutionError("Duplicate attempt has no campaign reference")
    async with persistence_guard(session, "accept_duplicate_attempt"):
        campaign = await session.get(Campaign, attempt.campaign_id)
    if campaign is None:
        raise DuplicateResolutionError(
            f"Campaign {attempt.campaign_id} for duplicate attempt {attempt_id} no longer exists"
        )

    info = parse_json_object(attempt.influencer_info)
    payload = order_payload_from_info(campaign.id, info)

    async with persistence_guard(session, "accept_duplicate_attempt"):
        order = await create_order(session, payload, commit=False)
        await session.delete(attempt)
        await session.commit()
        await session.refresh(order)

    await increment_claims(session, campaign.id)
    logger.info("duplicate_attempt_accepted", attempt_id=attempt_id, order_id=order.id)
    return order_from_row(row_as_dict(order), campaign.name)


async def decline_duplicate_attempt(session: AsyncSession, attempt_id: int) -> None:
    attempt = await _load_attempt(session, attempt_id)
    async with persistence_guard(session, "decline_duplicate_attempt"):
        await session.delete(attempt)
        await session.commit()
    logger.info("duplicate_attempt_declined", attempt_id=attempt_id)


async def set_duplicate_decision(
    session: AsyncSession, attempt_id: int, decision: str = "pending"
) -> DuplicateAttemptOut:
    if decision not in DUPLICATE_DECISIONS:
        raise ValueError(f"Unknown decision: {decision}")
    attempt = await _load_attempt(session, attempt_id)
    info = parse_json_object(attempt.influencer_info)
    info["decision"] = decision
    async with persistence_guard(session, "set_duplicate_decision"):
        attempt.influencer_info = info
        await session.commit()
        await session.refresh(attempt)
    return duplicate_from_row(row_as_dict(attempt))
