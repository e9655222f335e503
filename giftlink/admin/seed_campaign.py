from __future__ import annotations

import argparse
import asyncio

from giftlink.core.database import AsyncSessionLocal, init_db
from giftlink.schemas.admin.campaign import CampaignCreate
from giftlink.schemas.campaign_config import CampaignConfig
from giftlink.services.campaigns import create_campaign
from giftlink.services.product_catalog import list_products, unknown_product_ids


async def _seed(name: str, product_ids: list[str], item_limit: int, shipping_zone: str) -> None:
    await init_db()
    payload = CampaignCreate(
        name=name,
        welcome_message="Pick your gift and tell us where to send it.",
        config=CampaignConfig(
            selected_product_ids=product_ids,
            item_limit=item_limit,
            shipping_zone=shipping_zone,
            show_instagram_field=True,
            show_consent_checkbox=True,
        ),
    )
    async with AsyncSessionLocal() as session:
        campaign = await create_campaign(session, payload)
    print(f"Created campaign {campaign.name} (id={campaign.id}) at {campaign.claim_url}")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a demo campaign from the built-in catalog.")
    parser.add_argument("--name", default="Summer Seeding")
    parser.add_argument(
        "--products",
        default=",".join(product.id for product in list_products()[:3]),
        help="Comma separated catalog ids.",
    )
    parser.add_argument("--item-limit", type=int, default=1)
    parser.add_argument("--zone", default="Worldwide", help="Single country or Worldwide.")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    product_ids = [part.strip() for part in args.products.split(",") if part.strip()]
    unknown = unknown_product_ids(product_ids)
    if unknown:
        raise SystemExit(f"Unknown products: {', '.join(unknown)}")
    asyncio.run(_seed(args.name, product_ids, args.item_limit, args.zone))


if __name__ == "__main__":
    main()
