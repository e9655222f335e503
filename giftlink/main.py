from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from giftlink.api.admin import router as admin_router
from giftlink.api.auth import router as auth_router
from giftlink.api.catalog import router as catalog_router
from giftlink.api.claim import router as claim_router
from giftlink.core.config import settings
from giftlink.core.database import init_db
from giftlink.core.logging import setup_logging
from giftlink.services.address_lookup import AddressLookupError
from giftlink.services.claim_form import (
    ClaimRejectedError,
    ClaimValidationError,
    InvalidTransitionError,
)
from giftlink.services.duplicates import DuplicateAttemptNotFoundError, DuplicateResolutionError
from giftlink.services.gateway import PersistenceError

logger = structlog.get_logger(__name__)

app = FastAPI(title="Giftlink")


@app.exception_handler(ClaimValidationError)
async def claim_validation_handler(request: Request, exc: ClaimValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": exc.message, "field_errors": exc.field_errors},
    )


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc), "field_errors": {}})


@app.exception_handler(ClaimRejectedError)
async def claim_rejected_handler(request: Request, exc: ClaimRejectedError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": str(exc)})


@app.exception_handler(DuplicateResolutionError)
async def duplicate_resolution_handler(
    request: Request, exc: DuplicateResolutionError
) -> JSONResponse:
    status_code = 404 if isinstance(exc, DuplicateAttemptNotFoundError) else 409
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.exception_handler(AddressLookupError)
async def address_lookup_handler(request: Request, exc: AddressLookupError) -> JSONResponse:
    logger.error("errors", stage="address_lookup", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"error": "Address lookup is unavailable"})


@app.exception_handler(PersistenceError)
async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": "Service temporarily unavailable"})


origins = [origin.strip() for origin in settings.ADMIN_UI_ORIGINS.split(",") if origin.strip()]
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging()
    if settings.APP_ENV.lower() != "development" and settings.JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in non-development environments")
    await init_db()


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(claim_router)
app.include_router(admin_router)
