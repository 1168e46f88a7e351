from fastapi import APIRouter

from cookout.api.cookout import router as cookout_router
from cookout.api.health import router as health_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(cookout_router)
