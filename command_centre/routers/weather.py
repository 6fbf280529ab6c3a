"""
Weather endpoint.

GET /api/weather
"""

from fastapi import APIRouter, Depends

from command_centre.services.weather import WeatherClient

router = APIRouter(prefix="/api")


def get_weather_client() -> WeatherClient:
    return WeatherClient()


@router.get("/weather")
async def get_weather(client: WeatherClient = Depends(get_weather_client)):
    report = await client.fetch()
    return report.to_dict()
