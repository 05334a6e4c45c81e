import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from aeroweather.api.deps import get_aviationweather_client
from aeroweather.clients.aviationweather import REPORT_TYPES, AviationWeatherClient, clean_ids
from aeroweather.core.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter()

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/weather")
async def get_weather(
    report_type: Optional[str] = Query(None, alias="type", description="metar, taf or station"),
    ids: Optional[str] = Query(None, description="Comma-separated ICAO codes"),
    aw: AviationWeatherClient = Depends(get_aviationweather_client),
):
    if not report_type or not ids:
        raise HTTPException(status_code=400, detail="Missing type or ids parameter")
    report_type = report_type.strip().lower()
    if report_type not in REPORT_TYPES:
        raise HTTPException(status_code=400, detail="Invalid type parameter")
    stations = clean_ids(ids)
    if not stations:
        raise HTTPException(status_code=400, detail="Invalid ids parameter")

    try:
        data = await aw.fetch(report_type, ",".join(stations))
    except UpstreamError as exc:
        if report_type == "station":
            # station info is optional enrichment; report "no data" instead of an error
            logger.info("Station lookup failed for %s: %s", ids, exc.message)
            return JSONResponse(content=None, headers=NO_STORE_HEADERS)
        raise

    if data is None:
        data = None if report_type == "station" else []
    return JSONResponse(content=data, headers=NO_STORE_HEADERS)
