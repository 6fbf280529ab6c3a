"""
Current weather from OpenWeatherMap, with a fixed fallback report.
"""

from datetime import date, timedelta

import httpx

from command_centre.config import settings
from command_centre.core.logging import get_logger
from command_centre.core.models import WeatherReport
from command_centre.services.http import client_session

log = get_logger(__name__)

API_URL = "https://api.openweathermap.org/data/2.5/weather"


def fallback_report(today: date | None = None) -> WeatherReport:
    """Typical local winter conditions, used when the API is unavailable."""
    today = today or date.today()
    forecast = [
        {"date": (today + timedelta(days=1)).isoformat(), "high": 9, "low": 4, "description": "cloudy", "icon": "clouds"},
        {"date": (today + timedelta(days=2)).isoformat(), "high": 10, "low": 5, "description": "light rain", "icon": "rain"},
        {"date": (today + timedelta(days=3)).isoformat(), "high": 8, "low": 3, "description": "clear", "icon": "clear"},
    ]
    return WeatherReport(
        temp=8,
        feels_like=5,
        description="partly cloudy",
        icon="clouds",
        humidity=72,
        wind_speed=14,
        forecast=forecast,
    )


class WeatherClient:
    def __init__(self, api_key: str | None = None, http: httpx.AsyncClient | None = None):
        self.api_key = api_key if api_key is not None else settings.openweather_api_key
        self._http = http

    async def fetch(self) -> WeatherReport:
        """Current conditions, or the fallback report."""
        if not self.api_key:
            return fallback_report()

        try:
            async with client_session(self._http) as client:
                response = await client.get(
                    API_URL,
                    params={
                        "lat": settings.weather_lat,
                        "lon": settings.weather_lon,
                        "units": "metric",
                        "appid": self.api_key,
                    },
                )
            if response.status_code != 200:
                log.warning("weather_http_error", status=response.status_code)
                return fallback_report()

            data = response.json()
            condition = data["weather"][0]
            return WeatherReport(
                temp=round(data["main"]["temp"]),
                feels_like=round(data["main"]["feels_like"]),
                description=condition["description"],
                icon=condition["main"].lower(),
                humidity=data["main"]["humidity"],
                wind_speed=round(data["wind"]["speed"] * 3.6),  # m/s to km/h
            )

        except Exception as e:
            log.error("weather_fetch_error", error=str(e))
            return fallback_report()
