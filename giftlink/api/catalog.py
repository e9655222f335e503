from __future__ import annotations

from fastapi import APIRouter

from giftlink.schemas.product import Product
from giftlink.services.campaign_config import shipping_zones
from giftlink.services.product_catalog import list_products

router = APIRouter(tags=["catalog"])


@router.get("/products", response_model=list[Product])
async def get_products() -> list[Product]:
    return list_products()


@router.get("/shipping-zones", response_model=list[str])
async def get_shipping_zones() -> list[str]:
    return shipping_zones()
