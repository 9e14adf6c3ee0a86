from fastapi import APIRouter, Depends, HTTPException, Query

from weatherbot.api.deps import get_weather_service
from weatherbot.schemas.weather import WeatherCacheStatus, WeatherSnapshot
from weatherbot.services.weather_client import WeatherServiceError
from weatherbot.services.weather_service import WeatherService

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("", response_model=WeatherSnapshot, response_model_by_alias=True)
async def get_current_weather(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherSnapshot:
    try:
        return await service.get_current_weather(lat, lon)
    except WeatherServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.get("/cache", response_model=WeatherCacheStatus, response_model_by_alias=True)
def get_cache_status(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherCacheStatus:
    return service.get_cache_status(lat, lon)


@router.delete("/cache", status_code=204)
def clear_cache(service: WeatherService = Depends(get_weather_service)) -> None:
    service.clear_cache()
