from fastapi import APIRouter

from giftlink.api.admin.campaigns import router as campaigns_router
from giftlink.api.admin.duplicates import router as duplicates_router
from giftlink.api.admin.logs import router as logs_router
from giftlink.api.admin.orders import router as orders_router

router = APIRouter()
router.include_router(campaigns_router)
router.include_router(orders_router)
router.include_router(duplicates_router)
router.include_router(logs_router)
