from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from aeroweather.api.access import keys_match
from aeroweather.api.deps import get_settings
from aeroweather.core.config import Settings

router = APIRouter()


@router.get("/verify-key")
async def verify_key(
    key: Optional[str] = Query(None),
    settings: Settings = Depends(get_settings),
):
    if not settings.access_key or keys_match(key, settings.access_key):
        return {"authorized": True}
    return JSONResponse(status_code=403, content={"authorized": False})
