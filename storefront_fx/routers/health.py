from fastapi import APIRouter, Depends

from storefront_fx.core.auth import get_app_settings
from storefront_fx.core.config import Settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health(settings: Settings = Depends(get_app_settings)):
    return {"status": "ok", "version": settings.version}
