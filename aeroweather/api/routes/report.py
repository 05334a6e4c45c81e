from fastapi import APIRouter, Depends, HTTPException, Query, Request

from aeroweather.api.deps import get_report_service, get_settings, rate_limit
from aeroweather.core.config import Settings
from aeroweather.models.report import WeatherReport
from aeroweather.services.report_service import ReportService

router = APIRouter()


@router.get("/report", response_model=WeatherReport)
async def get_report(
    request: Request,
    ids: str = Query(..., min_length=3, max_length=8, description="ICAO station code"),
    analysis: bool = Query(True, description="Run the AI analysis phase"),
    settings: Settings = Depends(get_settings),
    svc: ReportService = Depends(get_report_service),
):
    # the analysis phase calls the model, so it shares the analyze endpoint's budget
    if analysis:
        await rate_limit(request, settings)
    try:
        return await svc.generate(ids, include_analysis=analysis)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
