from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aeroweather.core.config import Settings, settings as default_settings
from aeroweather.core.errors import register_exception_handlers
from aeroweather.core.logging import configure_logging
from aeroweather.api.access import AccessGate
from aeroweather.api.routes.analyze import router as analyze_router
from aeroweather.api.routes.report import router as report_router
from aeroweather.api.routes.verify_key import router as verify_key_router
from aeroweather.api.routes.weather import router as weather_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # resources are created lazily in api.deps; only close what was built
    for name in ("analysis_cache", "analysis_service"):
        resource = getattr(app.state, name, None)
        if resource is not None:
            await resource.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    # registered last so it runs first
    app.middleware("http")(AccessGate(settings.access_key, language=settings.display_language))

    register_exception_handlers(app)

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    app.include_router(weather_router, prefix="/api", tags=["weather"])
    app.include_router(verify_key_router, prefix="/api", tags=["access"])
    app.include_router(analyze_router, prefix="/api", tags=["analysis"])
    app.include_router(report_router, prefix="/api", tags=["report"])

    return app

app = create_app()
