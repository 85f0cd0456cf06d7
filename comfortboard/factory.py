from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from comfortboard.api.router import api_router
from comfortboard.clients.openweather import OpenWeatherClient
from comfortboard.core.config import APP_VERSION, Settings, load_settings
from comfortboard.core.errors import WeatherServiceError
from comfortboard.schemas.weather import ErrorResponse
from comfortboard.services.weather import WeatherResultCache

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.weather_client = OpenWeatherClient(
            api_key=settings.openweather_api_key,
            timeout_seconds=settings.weather_timeout_seconds,
            base_url=str(settings.openweather_base_url),
            units=settings.openweather_units,
        )
        logger.info(
            "Weather service ready: cache TTL %ss, minimum %d cities, city list %s",
            int(app.state.weather_cache.ttl_seconds),
            settings.weather_min_cities,
            settings.cities_file,
        )
        yield
        app.state.weather_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Weather Comfort API",
        version=APP_VERSION,
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.weather_cache = WeatherResultCache()

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.exception_handler(WeatherServiceError)
    async def weather_service_error(request: Request, exc: WeatherServiceError):
        logger.error("Weather request %s failed: %s", request.url.path, exc)
        body = ErrorResponse(error="Failed to fetch weather data", message=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "comfortboard", "status": "ok"}

    app.include_router(api_router)
    return app
