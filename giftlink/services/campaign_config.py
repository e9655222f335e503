from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from giftlink.core.config import settings
from giftlink.schemas.campaign_config import SHIP_ANYWHERE, CampaignConfig

_COUNTRY_SPLIT_RE = re.compile(r"[,;\n]+")


def storage_columns() -> tuple[str, ...]:
    return tuple(CampaignConfig.model_fields)


def to_storage_row(config: CampaignConfig | Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(config, CampaignConfig):
        config = CampaignConfig.model_validate(dict(config))
    row = config.model_dump()
    row["selected_product_ids"] = list(config.selected_product_ids)
    if config.order_limit_per_link is not None:
        row["order_limit_per_link"] = int(config.order_limit_per_link)
    if config.max_cart_value is not None:
        row["max_cart_value"] = float(config.max_cart_value)
    return row


def from_storage_row(row: Mapping[str, Any]) -> CampaignConfig:
    present = {
        name: row[name]
        for name in storage_columns()
        if name in row and row[name] is not None
    }
    if isinstance(present.get("max_cart_value"), Decimal):
        present["max_cart_value"] = float(present["max_cart_value"])
    return CampaignConfig.model_validate(present)


def restricted_country_list(config: CampaignConfig) -> list[str]:
    return [
        part.strip()
        for part in _COUNTRY_SPLIT_RE.split(config.restricted_countries or "")
        if part.strip()
    ]


def shipping_violation(config: CampaignConfig, country: str | None) -> str | None:
    normalized = (country or "").strip().lower()
    zone = (config.shipping_zone or SHIP_ANYWHERE).strip()
    if zone.lower() != SHIP_ANYWHERE.lower() and normalized != zone.lower():
        return f"This campaign only ships to {zone}."
    denied = {country_name.lower() for country_name in restricted_country_list(config)}
    if normalized and normalized in denied:
        return f"This campaign does not ship to {country}."
    return None


def shipping_zones() -> list[str]:
    zones = [SHIP_ANYWHERE]
    for zone in _COUNTRY_SPLIT_RE.split(settings.DEFAULT_SHIPPING_ZONES):
        zone = zone.strip()
        if zone and zone.lower() not in {item.lower() for item in zones}:
            zones.append(zone)
    return zones
