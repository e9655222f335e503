from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from giftlink.schemas.claim import OrderItem


class OrderOut(BaseModel):
    id: int
    campaign_id: int | None = None
    campaign_name: str = "Standard Campaign"
    created_at: datetime | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    instagram: str | None = None
    tiktok: str | None = None
    items: list[OrderItem] = []
    shipping_address: dict[str, Any] | str | None = None
    status: str = "pending"
    consent_primary: bool | None = None
    consent_secondary: bool | None = None
    marketing_opt_in: bool | None = None
    custom_answer: str | None = None
    value: float = 0.0
