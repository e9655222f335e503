from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SHIP_ANYWHERE = "Worldwide"


class CampaignConfig(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    selected_product_ids: list[str] = Field(default_factory=list)
    item_limit: int = 1
    order_limit_per_link: int | None = Field(default=None, ge=1)
    max_cart_value: float | None = Field(default=None, ge=0)
    block_duplicate_orders: bool = False

    shipping_zone: str = SHIP_ANYWHERE
    restricted_countries: str = ""

    show_phone_field: bool = False
    show_instagram_field: bool = False
    show_tiktok_field: bool = False
    ask_custom_question: bool = False
    custom_question_label: str = ""
    custom_question_required: bool = False

    show_consent_checkbox: bool = False
    terms_consent_text: str = ""
    show_second_consent: bool = False
    second_consent_text: str = ""
    require_second_consent: bool = False
    email_opt_in: bool = False
    email_opt_in_text: str = ""

    grid_layout: bool = True
    show_sold_out: bool = True
    show_visit_store_link: bool = False
    visit_store_url: str | None = None
    visit_store_label: str = ""
    submit_button_label: str = ""

    @field_validator("selected_product_ids", mode="before")
    @classmethod
    def parse_product_ids(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = [part for part in value.split(",")]
        if not isinstance(value, (list, tuple, set)):
            return []
        ids: list[str] = []
        for item in value:
            cleaned = str(item).strip()
            if cleaned and cleaned not in ids:
                ids.append(cleaned)
        return ids

    @field_validator("item_limit", mode="before")
    @classmethod
    def clamp_item_limit(cls, value: Any) -> int:
        if value is None or value == "":
            return 1
        return max(1, int(value))

    @field_validator("order_limit_per_link", "max_cart_value", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("shipping_zone", mode="before")
    @classmethod
    def default_zone(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return SHIP_ANYWHERE
        return value
