from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giftlink.api.deps import get_current_admin, get_request_ip
from giftlink.core.config import settings
from giftlink.core.database import get_session
from giftlink.models.admin_user import AdminUser
from giftlink.schemas.admin.auth import AdminUserOut, LoginRequest, TokenResponse
from giftlink.services.auth import create_access_token, verify_password
from giftlink.services.rate_limit import login_limiter
from giftlink.utils.time import utc_now

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    ip = await get_request_ip(request)
    if not login_limiter.allow(ip or payload.username):
        raise HTTPException(status_code=429, detail="Too many login attempts")

    result = await session.execute(
        select(AdminUser).where(AdminUser.username == payload.username)
    )
    admin = result.scalars().first()
    if not admin or not admin.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not verify_password(payload.password, admin.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    admin.last_login_at = utc_now()
    await session.commit()

    return TokenResponse(
        access_token=create_access_token(str(admin.id), admin.role),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=AdminUserOut)
async def me(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    return admin
