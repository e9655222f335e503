"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19 00:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("display_name", sa.String(length=150)),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="staff"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("welcome_message", sa.Text()),
        sa.Column("brand_color", sa.String(length=20)),
        sa.Column("brand_logo", sa.Text()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("claims", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("selected_product_ids", postgresql.JSONB()),
        sa.Column("item_limit", sa.Integer()),
        sa.Column("order_limit_per_link", sa.Integer()),
        sa.Column("max_cart_value", sa.Numeric(12, 2)),
        sa.Column("block_duplicate_orders", sa.Boolean()),
        sa.Column("shipping_zone", sa.String(length=100)),
        sa.Column("restricted_countries", sa.Text()),
        sa.Column("show_phone_field", sa.Boolean()),
        sa.Column("show_instagram_field", sa.Boolean()),
        sa.Column("show_tiktok_field", sa.Boolean()),
        sa.Column("ask_custom_question", sa.Boolean()),
        sa.Column("custom_question_label", sa.Text()),
        sa.Column("custom_question_required", sa.Boolean()),
        sa.Column("show_consent_checkbox", sa.Boolean()),
        sa.Column("terms_consent_text", sa.Text()),
        sa.Column("show_second_consent", sa.Boolean()),
        sa.Column("second_consent_text", sa.Text()),
        sa.Column("require_second_consent", sa.Boolean()),
        sa.Column("email_opt_in", sa.Boolean()),
        sa.Column("email_opt_in_text", sa.Text()),
        sa.Column("grid_layout", sa.Boolean()),
        sa.Column("show_sold_out", sa.Boolean()),
        sa.Column("show_visit_store_link", sa.Boolean()),
        sa.Column("visit_store_url", sa.Text()),
        sa.Column("visit_store_label", sa.String(length=100)),
        sa.Column("submit_button_label", sa.String(length=100)),
        *_timestamps(),
    )
    op.create_index("ix_campaigns_slug", "campaigns", ["slug"], unique=True)
    op.create_index("ix_campaigns_status", "campaigns", ["status"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("influencer_name", sa.String(length=255)),
        sa.Column("influencer_email", sa.String(length=255)),
        sa.Column("influencer_phone", sa.String(length=32)),
        sa.Column("influencer_handle", sa.String(length=255)),
        sa.Column("influencer_handle_instagram", sa.String(length=255)),
        sa.Column("influencer_handle_tiktok", sa.String(length=255)),
        sa.Column("shipping_address", postgresql.JSONB()),
        sa.Column("items", postgresql.JSONB()),
        sa.Column("status", sa.String(length=20), server_default="pending"),
        sa.Column("terms_consent_accepted", sa.Boolean()),
        sa.Column("second_consent_accepted", sa.Boolean()),
        sa.Column("marketing_opt_in_accepted", sa.Boolean()),
        sa.Column("custom_answer", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_orders_campaign_id", "orders", ["campaign_id"])
    op.create_index("ix_orders_influencer_email", "orders", ["influencer_email"])

    op.create_table(
        "duplicate_attempts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "campaign_id",
            sa.Integer(),
            sa.ForeignKey("campaigns.id", ondelete="SET NULL"),
        ),
        sa.Column("influencer_info", postgresql.JSONB()),
        sa.Column("reason", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_duplicate_attempts_campaign_id", "duplicate_attempts", ["campaign_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("admin_id", sa.Integer(), sa.ForeignKey("admin_users.id")),
        sa.Column("entity", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.Integer()),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column("before_json", postgresql.JSONB()),
        sa.Column("after_json", postgresql.JSONB()),
        sa.Column("ip", sa.String(length=64)),
        sa.Column("user_agent", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "app_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("level", sa.String(length=20), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("message", sa.Text()),
        sa.Column("data", postgresql.JSONB()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_app_logs_event_type", "app_logs", ["event_type"])


def downgrade() -> None:
    op.drop_index("ix_app_logs_event_type", table_name="app_logs")
    op.drop_table("app_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_duplicate_attempts_campaign_id", table_name="duplicate_attempts")
    op.drop_table("duplicate_attempts")
    op.drop_index("ix_orders_influencer_email", table_name="orders")
    op.drop_index("ix_orders_campaign_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_campaigns_status", table_name="campaigns")
    op.drop_index("ix_campaigns_slug", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_admin_users_username", table_name="admin_users")
    op.drop_table("admin_users")
