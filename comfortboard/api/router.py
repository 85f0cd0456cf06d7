from fastapi import APIRouter

from comfortboard.api.routes import auth, meta, weather

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(weather.router, tags=["weather"])
api_router.include_router(meta.router, tags=["meta"])
