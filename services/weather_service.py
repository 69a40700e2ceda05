"""
Live weather feed service (simulated)
"""
import math
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from config import Settings
from models.model import LiveWeather, WeatherTrend
from services.base_service import BaseService

PLACEHOLDER_API_KEY = "YOUR_OPENWEATHER_API_KEY"
SIMULATION_SOURCE = "Live Weather Simulation (Demo Mode)"

# Monthly averages per city: temperature, humidity, pressure, wind speed
CITY_BASES: Dict[str, Dict[str, float]] = {
    "mumbai": {"temperature": 30, "humidity": 75, "pressure": 1010, "wind_speed": 15},
    "chennai": {"temperature": 32, "humidity": 70, "pressure": 1012, "wind_speed": 12},
    "kolkata": {"temperature": 29, "humidity": 80, "pressure": 1011, "wind_speed": 8},
    "delhi": {"temperature": 35, "humidity": 45, "pressure": 1015, "wind_speed": 10},
    "bangalore": {"temperature": 25, "humidity": 60, "pressure": 1018, "wind_speed": 6},
    "hyderabad": {"temperature": 33, "humidity": 55, "pressure": 1014, "wind_speed": 9},
}
DEFAULT_CITY = "mumbai"

RAINY_SEASON_MONTHS = (6, 7, 8, 9)


def is_rainy_season(moment: datetime) -> bool:
    return moment.month in RAINY_SEASON_MONTHS


class WeatherService(BaseService):
    """
    Simulated live weather feed

    Each reading is generated independently from the city base values, the
    hour of day and the season. Nothing is cached between calls.
    """

    def __init__(self, config: Optional[Settings] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        super().__init__(config)

    @property
    def api_key_configured(self) -> bool:
        key = self.config.openweather_api_key
        return bool(key) and key != PLACEHOLDER_API_KEY

    def _reading(self, location: str, moment: datetime) -> LiveWeather:
        base = CITY_BASES.get(location.lower(), CITY_BASES[DEFAULT_CITY])
        rainy = is_rainy_season(moment)
        rand = self.rng.random

        # Diurnal curve peaks mid-afternoon
        temperature = round(
            base["temperature"] + math.sin((moment.hour - 6) * math.pi / 12) * 8 + (rand() - 0.5) * 4
        )
        pressure = round(base["pressure"] + (rand() - 0.5) * 20)

        humidity = base["humidity"] + (15 if rainy else -10) + (rand() - 0.5) * 10
        humidity = max(20, min(95, round(humidity)))

        wind_speed = max(0, round(base["wind_speed"] + (rand() - 0.5) * 10))

        rain_probability = 0.3 if rainy else 0.1
        if rand() < rain_probability:
            rainfall = rand() * 50 + 5
        else:
            rainfall = rand() * 2
        rainfall = round(rainfall, 1)

        return LiveWeather(
            temperature=temperature,
            humidity=humidity,
            pressure=pressure,
            wind_speed=wind_speed,
            rainfall=rainfall,
            location=location.capitalize(),
            timestamp=moment,
            source=SIMULATION_SOURCE,
        )

    def fetch_live_weather(self, location: str, now: Optional[datetime] = None) -> LiveWeather:
        """
        Current conditions for a city

        Args:
            location: City key; unknown cities use Mumbai's base values
            now: Reading time (defaults to the current time)
        """
        now = now or datetime.now()
        reading = self._reading(location, now)
        self._log_operation("fetch_live_weather", {
            "location": reading.location,
            "temperature": reading.temperature,
            "rainfall": reading.rainfall,
        })
        return reading

    def weather_trend(self, location: str, hours: int = 24,
                      now: Optional[datetime] = None) -> List[LiveWeather]:
        """Hourly readings from `hours` ago up to now, oldest first"""
        now = now or datetime.now()
        return [
            self._reading(location, now - timedelta(hours=offset))
            for offset in range(hours, -1, -1)
        ]

    def trend_report(self, location: str, hours: int = 24,
                     now: Optional[datetime] = None) -> WeatherTrend:
        points = self.weather_trend(location, hours, now=now)
        self._log_operation("weather_trend", {"location": location, "points": len(points)})
        return WeatherTrend(
            location=location.capitalize(),
            hours=hours,
            points=points,
            api_key_configured=self.api_key_configured,
            refresh_seconds=self.config.live_refresh_seconds,
        )
