from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from giftlink.schemas.address import ResolvedAddress
from giftlink.schemas.campaign_config import CampaignConfig
from giftlink.schemas.product import Product


class OrderItem(BaseModel):
    id: str
    title: str
    price: float
    image: str | None = None


class OrderPayload(BaseModel):
    campaign_id: int
    first_name: str = ""
    last_name: str = ""
    email: str
    phone: str | None = None
    instagram: str | None = None
    tiktok: str | None = None
    address: str = ""
    shipping_details: ResolvedAddress | None = None
    items: list[OrderItem] = Field(default_factory=list)
    custom_answer: str | None = None
    consent_primary: bool = False
    consent_secondary: bool = False
    marketing_opt_in: bool = False

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()


class ClaimSubmission(BaseModel):
    product_ids: list[str] = Field(default_factory=list)
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    instagram: str = ""
    tiktok: str = ""
    address: str = ""
    address_id: str | None = None
    custom_answer: str = ""
    consent_primary: bool = False
    consent_secondary: bool = False
    marketing_opt_in: bool = False


class ClaimResult(BaseModel):
    outcome: Literal["created", "duplicate"]
    order_id: int | None = None
    attempt_id: int | None = None


class ClaimConfirmation(BaseModel):
    status: str = "confirmed"
    message: str = "Your gifts are on the way. Check your email for tracking."


class PublicCampaignOut(BaseModel):
    slug: str
    name: str
    welcome_message: str | None = None
    brand_color: str | None = None
    brand_logo: str | None = None
    claim_url: str
    accepting_claims: bool = True
    config: CampaignConfig
    products: list[Product] = Field(default_factory=list)
