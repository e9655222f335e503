from giftlink.models.admin_user import AdminUser
from giftlink.models.app_log import AppLog
from giftlink.models.audit_log import AuditLog
from giftlink.models.base import Base, TimestampMixin
from giftlink.models.campaign import Campaign
from giftlink.models.duplicate_attempt import DuplicateAttempt
from giftlink.models.order import Order

__all__ = [
    "AdminUser",
    "AppLog",
    "AuditLog",
    "Base",
    "TimestampMixin",
    "Campaign",
    "DuplicateAttempt",
    "Order",
]
