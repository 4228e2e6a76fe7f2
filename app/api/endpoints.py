from fastapi import APIRouter

from app.api.routes import chats, entries, health, insights


router = APIRouter()

router.include_router(entries.router)
router.include_router(insights.router)
router.include_router(chats.router)
router.include_router(health.router)
