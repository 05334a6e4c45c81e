import time
from fastapi import Request, HTTPException, Depends

from aeroweather.core.config import Settings
from aeroweather.clients.aviationweather import AviationWeatherClient
from aeroweather.services.analysis_cache import AnalysisCache
from aeroweather.services.analysis_service import AnalysisService
from aeroweather.services.report_service import ReportService


_rate_bucket = {}  # ip -> (window_start_epoch, count)
_rate_window = 0


def _prune_rate_bucket(window: int) -> None:
    # counters from earlier windows are never read again
    for ip in [ip for ip, (start, _) in _rate_bucket.items() if start != window]:
        del _rate_bucket[ip]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def rate_limit(request: Request, settings: Settings = Depends(get_settings)):
    global _rate_window
    ip = request.client.host if request.client else "unknown"
    now = int(time.time())
    window = now - (now % 60)

    if window != _rate_window:
        _prune_rate_bucket(window)
        _rate_window = window

    win_start, count = _rate_bucket.get(ip, (window, 0))
    if win_start != window:
        win_start, count = window, 0

    count += 1
    _rate_bucket[ip] = (win_start, count)

    if count > settings.rate_limit_per_minute:
        raise HTTPException(status_code=429, detail="Rate limit exceeded. Try again in a minute.")


def get_aviationweather_client(settings: Settings = Depends(get_settings)) -> AviationWeatherClient:
    return AviationWeatherClient(
        base_url=settings.aviationweather_base_url,
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
    )


def get_analysis_cache(request: Request) -> AnalysisCache:
    state = request.app.state
    cache = getattr(state, "analysis_cache", None)
    if cache is None:
        cache = AnalysisCache.from_settings(state.settings)
        state.analysis_cache = cache
    return cache


def get_analysis_service(request: Request) -> AnalysisService:
    state = request.app.state
    svc = getattr(state, "analysis_service", None)
    if svc is None:
        svc = AnalysisService.from_settings(state.settings)
        state.analysis_service = svc
    return svc


def get_report_service(
    settings: Settings = Depends(get_settings),
    aw: AviationWeatherClient = Depends(get_aviationweather_client),
    analysis: AnalysisService = Depends(get_analysis_service),
    cache: AnalysisCache = Depends(get_analysis_cache),
) -> ReportService:
    return ReportService(
        aviationweather=aw,
        analysis=analysis,
        analysis_cache=cache,
        language=settings.display_language,
        analysis_timeout_seconds=settings.analysis_timeout_seconds,
    )
