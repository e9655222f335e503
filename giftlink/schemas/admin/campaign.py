from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from giftlink.schemas.campaign_config import CampaignConfig

CampaignStatus = Literal["active", "archived"]


class CampaignCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    welcome_message: str | None = None
    brand_color: str = "#000000"
    brand_logo: str | None = None
    config: CampaignConfig = Field(default_factory=CampaignConfig)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Campaign name is required")
        return cleaned


class CampaignOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    welcome_message: str | None = None
    brand_color: str | None = None
    brand_logo: str | None = None
    status: CampaignStatus = "active"
    claims: int = 0
    claim_url: str | None = None
    config: CampaignConfig = Field(default_factory=CampaignConfig)
    created_at: datetime | None = None
    updated_at: datetime | None = None
