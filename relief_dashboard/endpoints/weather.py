import logging

from fastapi import APIRouter, Depends, HTTPException

from relief_dashboard import config, models, schemas
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.utils.weather import WeatherUnavailable, fetch_current_weather

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{location}", response_model=schemas.WeatherOut)
def current_weather(location: str, user: models.User = Depends(get_current_user)):
    if not config.is_weather_api_configured():
        raise HTTPException(status_code=500, detail="Weather API key not configured")
    try:
        return fetch_current_weather(location)
    except WeatherUnavailable:
        logger.exception("Error fetching weather data")
        raise HTTPException(status_code=500, detail="Failed to fetch weather data")
