from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.admin.utils import int_filter, list_response, parse_filter
from giftlink.api.deps import get_request_ip, require_role
from giftlink.core.database import get_session
from giftlink.schemas.admin.duplicate import DuplicateAttemptOut, DuplicateDecisionUpdate
from giftlink.schemas.admin.order import OrderOut
from giftlink.services import duplicates as duplicate_store
from giftlink.services.app_log_store import log_event
from giftlink.services.audit import record_audit

router = APIRouter(prefix="/admin/duplicates", tags=["admin"])


@router.get("", response_model=dict)
async def list_duplicates(
    skip: int = 0,
    limit: int = 50,
    order: str = "desc",
    filter: str | None = None,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> dict:
    filters = parse_filter(filter)
    campaign_id = int_filter(filters, "campaign_id")
    items, total = await duplicate_store.list_duplicate_attempts(
        session,
        campaign_id=campaign_id,
        decision=filters.get("decision"),
        order=order,
        skip=skip,
        limit=limit,
    )
    return list_response(items, total)


@router.post("/{attempt_id}/accept", response_model=OrderOut)
async def accept_duplicate(
    attempt_id: int,
    request: Request,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> OrderOut:
    order = await duplicate_store.accept_duplicate_attempt(session, attempt_id)
    await record_audit(
        session,
        admin_id=admin.id,
        entity="duplicate_attempts",
        action="accept",
        before={"attempt_id": attempt_id},
        after=order,
        ip=await get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
        entity_id=attempt_id,
    )
    await log_event(
        session,
        "info",
        "duplicate_accepted",
        f"Duplicate attempt {attempt_id} accepted as order {order.id}",
        {"attempt_id": attempt_id, "order_id": order.id, "admin_id": admin.id},
    )
    return order


@router.post("/{attempt_id}/decline", response_model=dict)
async def decline_duplicate(
    attempt_id: int,
    request: Request,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> dict[str, Any]:
    await duplicate_store.decline_duplicate_attempt(session, attempt_id)
    await record_audit(
        session,
        admin_id=admin.id,
        entity="duplicate_attempts",
        action="decline",
        before={"attempt_id": attempt_id},
        after=None,
        ip=await get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
        entity_id=attempt_id,
    )
    await log_event(
        session,
        "info",
        "duplicate_declined",
        f"Duplicate attempt {attempt_id} declined",
        {"attempt_id": attempt_id, "admin_id": admin.id},
    )
    return {"status": "declined"}


@router.patch("/{attempt_id}", response_model=DuplicateAttemptOut)
async def update_duplicate(
    attempt_id: int,
    payload: DuplicateDecisionUpdate,
    request: Request,
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_role("admin", "staff")),
) -> DuplicateAttemptOut:
    attempt = await duplicate_store.set_duplicate_decision(session, attempt_id, payload.decision)
    await record_audit(
        session,
        admin_id=admin.id,
        entity="duplicate_attempts",
        action="update",
        before=None,
        after={"decision": attempt.decision},
        ip=await get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
        entity_id=attempt_id,
    )
    return attempt
