from fastapi import APIRouter

from weatherbot.api.public.health import router as health_router
from weatherbot.api.recommendations import router as recommendations_router
from weatherbot.api.weather import router as weather_router


api_router = APIRouter()
api_router.include_router(health_router)

public_api_router = APIRouter(prefix="/api")
public_api_router.include_router(recommendations_router)
public_api_router.include_router(weather_router)

api_router.include_router(public_api_router)
