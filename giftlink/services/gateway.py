from __future__ import annotations

import json
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect

from giftlink.schemas.admin.campaign import CampaignCreate, CampaignOut
from giftlink.schemas.admin.duplicate import DuplicateAttemptOut
from giftlink.schemas.admin.order import OrderOut
from giftlink.schemas.claim import OrderItem, OrderPayload
from giftlink.services.campaign_config import from_storage_row, to_storage_row
from giftlink.services.navigation import claim_link

logger = structlog.get_logger(__name__)

DEFAULT_CAMPAIGN_NAME = "Standard Campaign"
DEFAULT_DUPLICATE_REASON = "Duplicate Attempt"
DUPLICATE_DECISIONS = ("pending", "accepted", "declined")


class PersistenceError(Exception):
    pass


@asynccontextmanager
async def persistence_guard(session: AsyncSession, stage: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("errors", stage=stage, error=str(exc))
        raise PersistenceError(f"{stage} failed") from exc


def row_as_dict(record: object) -> dict[str, Any]:
    mapper = inspect(record).mapper
    return {attr.key: getattr(record, attr.key) for attr in mapper.column_attrs}


def parse_items(raw: Any) -> list[dict[str, Any]]:
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def parse_json_object(raw: Any) -> dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return {}
    return dict(raw) if isinstance(raw, dict) else {}


def _item_price(item: Mapping[str, Any]) -> float:
    raw = item.get("price")
    if raw is None:
        raw = item.get("value")
    try:
        return float(raw if raw is not None else 0)
    except (TypeError, ValueError):
        return 0.0


def order_value(items: Any) -> float:
    total = 0.0
    for item in parse_items(items):
        total += _item_price(item)
    return total


def order_item_from_raw(item: Mapping[str, Any]) -> OrderItem:
    return OrderItem(
        id=str(item.get("id") or ""),
        title=str(item.get("title") or ""),
        price=_item_price(item),
        image=item.get("image"),
    )


def _first_present(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def order_from_row(row: Mapping[str, Any], campaign_name: str | None = None) -> OrderOut:
    items = parse_items(row.get("items"))
    shipping = row.get("shipping_address")
    if isinstance(shipping, str):
        parsed = parse_json_object(shipping) if shipping.startswith("{") else {}
        shipping = parsed or shipping
    return OrderOut(
        id=row["id"],
        campaign_id=row.get("campaign_id"),
        campaign_name=campaign_name or DEFAULT_CAMPAIGN_NAME,
        created_at=row.get("created_at"),
        name=row.get("influencer_name"),
        email=row.get("influencer_email"),
        phone=row.get("influencer_phone"),
        instagram=_first_present(row, "influencer_handle_instagram", "influencer_handle"),
        tiktok=_first_present(row, "influencer_handle_tiktok", "influencer_tiktok"),
        items=[order_item_from_raw(item) for item in items],
        shipping_address=shipping,
        status=row.get("status") or "pending",
        consent_primary=_first_present(row, "terms_consent_accepted", "terms_consent"),
        consent_secondary=row.get("second_consent_accepted"),
        marketing_opt_in=_first_present(row, "marketing_opt_in_accepted", "marketing_opt_in"),
        custom_answer=row.get("custom_answer"),
        value=order_value(items),
    )


def order_to_row(payload: OrderPayload) -> dict[str, Any]:
    if payload.shipping_details is not None:
        shipping: Any = payload.shipping_details.model_dump()
    else:
        shipping = payload.address or None
    return {
        "campaign_id": payload.campaign_id,
        "influencer_name": payload.full_name or None,
        "influencer_email": payload.email,
        "influencer_phone": payload.phone or None,
        "influencer_handle": payload.instagram or payload.tiktok or None,
        "influencer_handle_instagram": payload.instagram or None,
        "influencer_handle_tiktok": payload.tiktok or None,
        "shipping_address": shipping,
        "items": [item.model_dump() for item in payload.items],
        "status": "pending",
        "terms_consent_accepted": payload.consent_primary,
        "second_consent_accepted": payload.consent_secondary,
        "marketing_opt_in_accepted": payload.marketing_opt_in,
        "custom_answer": payload.custom_answer or None,
    }


def duplicate_from_row(
    row: Mapping[str, Any], campaign_name: str | None = None
) -> DuplicateAttemptOut:
    info = parse_json_object(row.get("influencer_info"))
    decision = info.get("decision")
    if decision not in DUPLICATE_DECISIONS:
        decision = "pending"
    return DuplicateAttemptOut(
        id=row["id"],
        campaign_id=row.get("campaign_id"),
        campaign_name=campaign_name or DEFAULT_CAMPAIGN_NAME,
        influencer_info=info,
        decision=decision,
        reason=row.get("reason") or DEFAULT_DUPLICATE_REASON,
        created_at=row.get("created_at"),
    )


def campaign_to_row(payload: CampaignCreate, slug: str) -> dict[str, Any]:
    row = to_storage_row(payload.config)
    row.update(
        slug=slug,
        name=payload.name,
        welcome_message=payload.welcome_message,
        brand_color=payload.brand_color,
        brand_logo=payload.brand_logo,
        status="active",
        claims=0,
    )
    return row


def campaign_from_row(row: Mapping[str, Any]) -> CampaignOut:
    slug = row["slug"]
    return CampaignOut(
        id=row["id"],
        slug=slug,
        name=row.get("name") or DEFAULT_CAMPAIGN_NAME,
        welcome_message=row.get("welcome_message"),
        brand_color=row.get("brand_color") or "#000000",
        brand_logo=row.get("brand_logo"),
        status=row.get("status") or "active",
        claims=int(row.get("claims") or 0),
        claim_url=claim_link(slug),
        config=from_storage_row(row),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
