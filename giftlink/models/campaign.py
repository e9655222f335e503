from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from giftlink.models.base import Base, JSONType, TimestampMixin


class Campaign(TimestampMixin, Base):
    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(120), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    welcome_message: Mapped[str | None] = mapped_column(Text)
    brand_color: Mapped[str | None] = mapped_column(String(20))
    brand_logo: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="active", index=True)
    claims: Mapped[int] = mapped_column(Integer, default=0)

    selected_product_ids: Mapped[list | None] = mapped_column(JSONType)
    item_limit: Mapped[int | None] = mapped_column(Integer)
    order_limit_per_link: Mapped[int | None] = mapped_column(Integer)
    max_cart_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    block_duplicate_orders: Mapped[bool | None] = mapped_column(Boolean)

    shipping_zone: Mapped[str | None] = mapped_column(String(100))
    restricted_countries: Mapped[str | None] = mapped_column(Text)

    show_phone_field: Mapped[bool | None] = mapped_column(Boolean)
    show_instagram_field: Mapped[bool | None] = mapped_column(Boolean)
    show_tiktok_field: Mapped[bool | None] = mapped_column(Boolean)
    ask_custom_question: Mapped[bool | None] = mapped_column(Boolean)
    custom_question_label: Mapped[str | None] = mapped_column(Text)
    custom_question_required: Mapped[bool | None] = mapped_column(Boolean)

    show_consent_checkbox: Mapped[bool | None] = mapped_column(Boolean)
    terms_consent_text: Mapped[str | None] = mapped_column(Text)
    show_second_consent: Mapped[bool | None] = mapped_column(Boolean)
    second_consent_text: Mapped[str | None] = mapped_column(Text)
    require_second_consent: Mapped[bool | None] = mapped_column(Boolean)
    email_opt_in: Mapped[bool | None] = mapped_column(Boolean)
    email_opt_in_text: Mapped[str | None] = mapped_column(Text)

    grid_layout: Mapped[bool | None] = mapped_column(Boolean)
    show_sold_out: Mapped[bool | None] = mapped_column(Boolean)
    show_visit_store_link: Mapped[bool | None] = mapped_column(Boolean)
    visit_store_url: Mapped[str | None] = mapped_column(Text)
    visit_store_label: Mapped[str | None] = mapped_column(String(100))
    submit_button_label: Mapped[str | None] = mapped_column(String(100))
