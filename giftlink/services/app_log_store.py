from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.models.app_log import AppLog

logger = structlog.get_logger(__name__)

LOG_LEVELS = {"debug", "info", "warning", "error"}


async def log_event(
    session: AsyncSession,
    level: str,
    event_type: str,
    message: str | None = None,
    data: dict | None = None,
    commit: bool = True,
) -> None:
    level = level if level in LOG_LEVELS else "info"
    getattr(logger, level)(event_type, message=message, **(data or {}))
    session.add(
        AppLog(
            level=level,
            event_type=event_type,
            message=message,
            data=data,
        )
    )
    if commit:
        await session.commit()
