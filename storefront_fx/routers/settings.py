from fastapi import APIRouter, Depends

from storefront_fx.db.dal import Database
from storefront_fx.models.settings import GeneralSettings
from storefront_fx.services.app_settings import get_general_settings
from .deps import get_db

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get(
    "/general", response_model=GeneralSettings, summary="Public general settings"
)
async def read_general_settings(db: Database = Depends(get_db)):
    return get_general_settings(db)
