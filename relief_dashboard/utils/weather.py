"""
Current weather lookups against OpenWeatherMap.

The dashboard shows temperature, humidity, wind and pressure for a district,
plus two coarse indicators (precipitation and water level trend) derived from
the reading.
"""
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from relief_dashboard import config

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "FloodReliefDashboard/1.0",
    "Accept": "application/json",
}

_session = None


class WeatherUnavailable(Exception):
    """Upstream weather service failed or returned something unusable."""


def get_session() -> requests.Session:
    global _session
    if _session is None:
        retry = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=frozenset(["GET"])
        )
        _session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
        _session.headers.update(HEADERS)
    return _session


def precipitation_status(description: str) -> str:
    desc = description.lower()
    if "heavy" in desc or "storm" in desc:
        return "Heavy Rain"
    if "rain" in desc or "drizzle" in desc:
        return "Rain"
    if "cloud" in desc:
        return "Cloudy"
    return "Fair"


def water_level_status(humidity: int) -> str:
    if humidity > 80:
        return "Rising"
    if humidity > 60:
        return "Stable"
    return "Low"


def fetch_current_weather(location: str) -> dict:
    """
    Fetch current conditions for a place name and reshape them for the dashboard.
    Raises WeatherUnavailable on any transport or payload problem.
    """
    params = {"q": location, "appid": config.OPENWEATHER_API_KEY, "units": "metric"}
    try:
        response = get_session().get(
            config.OPENWEATHER_URL,
            params=params,
            timeout=(config.WEATHER_CONNECT_TIMEOUT, config.WEATHER_READ_TIMEOUT),
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        raise WeatherUnavailable(f"Weather API request failed: {e}") from e
    except ValueError as e:
        raise WeatherUnavailable("Weather API returned invalid JSON") from e

    try:
        main = data["main"]
        description = data["weather"][0]["description"]
        weather = {
            "temperature": float(main["temp"]),
            "humidity": int(main["humidity"]),
            "description": description,
            "wind_speed": float(data["wind"]["speed"]),
            "pressure": int(main["pressure"]),
        }
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise WeatherUnavailable(f"Unexpected weather payload: {e}") from e

    weather["precipitation_status"] = precipitation_status(description)
    weather["water_level_status"] = water_level_status(weather["humidity"])
    logger.info(f"Weather for {location}: {weather['temperature']}°C, {description}")
    return weather
