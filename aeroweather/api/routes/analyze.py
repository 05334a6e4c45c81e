from fastapi import APIRouter, Depends, HTTPException

from aeroweather.api.deps import get_analysis_cache, get_analysis_service, rate_limit
from aeroweather.models.analysis import AnalysisResult, AnalyzeRequest
from aeroweather.services.analysis_cache import AnalysisCache
from aeroweather.services.analysis_service import AnalysisService

router = APIRouter()


@router.post("/analyze-weather", response_model=AnalysisResult)
async def post_analyze_weather(
    payload: AnalyzeRequest,
    _=Depends(rate_limit),
    svc: AnalysisService = Depends(get_analysis_service),
    cache: AnalysisCache = Depends(get_analysis_cache),
):
    if payload.observation is None and payload.forecast is None:
        raise HTTPException(status_code=400, detail="No weather data provided")

    # ConfigurationError -> 500, AnalysisError -> 502 (see core.errors)
    return await cache.fetch_or_compute(
        payload.observation,
        payload.forecast,
        lambda: svc.analyze(payload.observation, payload.forecast),
    )
