from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from giftlink.models.base import Base, JSONType, TimestampMixin


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(ForeignKey("campaigns.id"), index=True)
    influencer_name: Mapped[str | None] = mapped_column(String(255))
    influencer_email: Mapped[str | None] = mapped_column(String(255), index=True)
    influencer_phone: Mapped[str | None] = mapped_column(String(32))
    influencer_handle: Mapped[str | None] = mapped_column(String(255))
    influencer_handle_instagram: Mapped[str | None] = mapped_column(String(255))
    influencer_handle_tiktok: Mapped[str | None] = mapped_column(String(255))
    shipping_address: Mapped[dict | None] = mapped_column(JSONType)
    items: Mapped[list | None] = mapped_column(JSONType)
    status: Mapped[str | None] = mapped_column(String(20), default="pending")
    terms_consent_accepted: Mapped[bool | None] = mapped_column(Boolean)
    second_consent_accepted: Mapped[bool | None] = mapped_column(Boolean)
    marketing_opt_in_accepted: Mapped[bool | None] = mapped_column(Boolean)
    custom_answer: Mapped[str | None] = mapped_column(Text)

    campaign = relationship("Campaign")
