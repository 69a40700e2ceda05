from fastapi import APIRouter, Depends, Query
import structlog

from utils.dependencies import get_weather_service
from services.weather_service import WeatherService
from models.model import LiveWeather, WeatherTrend

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/weather",
    tags=["Live Weather"]
)


@router.get("/live/{location}", response_model=LiveWeather, summary="Current simulated conditions")
async def live_weather(location: str, weather: WeatherService = Depends(get_weather_service)):
    """Current conditions for a city; unknown cities use Mumbai's base values"""
    return weather.fetch_live_weather(location)


@router.get("/trend/{location}", response_model=WeatherTrend, summary="Hourly simulated readings")
async def weather_trend(
    location: str,
    hours: int = Query(24, ge=0, le=72, description="Hours of history; hours + 1 points are returned"),
    weather: WeatherService = Depends(get_weather_service)
):
    return weather.trend_report(location, hours)
