import os
from dotenv import load_dotenv
import urllib.parse

# Load .env file
load_dotenv()

# Database settings
DB_USER = os.getenv("DB_USER", "root")
DB_PASS = os.getenv("DB_PASS", "")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_NAME = os.getenv("DB_NAME", "flood_relief")

# URL-encode the password
DB_PASS_ENCODED = urllib.parse.quote(DB_PASS)

SQLALCHEMY_DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+mysqlconnector://{DB_USER}:{DB_PASS_ENCODED}@{DB_HOST}/{DB_NAME}",
)

# JWT settings
JWT_SECRET = os.getenv("JWT_SECRET", "supersecretjwtkey")
JWT_ALGORITHM = "HS256"
JWT_EXP_MINUTES = int(os.getenv("JWT_EXP_MINUTES", "1440"))

# OpenWeatherMap settings
OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
OPENWEATHER_URL = os.getenv("OPENWEATHER_URL", "https://api.openweathermap.org/data/2.5/weather")
WEATHER_CONNECT_TIMEOUT = float(os.getenv("WEATHER_CONNECT_TIMEOUT", "3"))
WEATHER_READ_TIMEOUT = float(os.getenv("WEATHER_READ_TIMEOUT", "8"))

# Twilio settings
TWILIO_SID = os.getenv("TWILIO_SID", "")
TWILIO_AUTH = os.getenv("TWILIO_AUTH", "")
TWILIO_PHONE = os.getenv("TWILIO_PHONE", "")

# HTTP settings
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Activity feed
ACTIVITY_LIMIT_DEFAULT = 20
ACTIVITY_LIMIT_MAX = 100


def is_weather_api_configured() -> bool:
    return bool(OPENWEATHER_API_KEY and OPENWEATHER_API_KEY != "your_openweathermap_api_key_here")


def is_sms_configured() -> bool:
    return bool(TWILIO_SID and TWILIO_AUTH and TWILIO_PHONE)


def get_config_status():
    """Configuration status for the setup command and debugging."""
    return {
        "database_url_set": "DATABASE_URL" in os.environ,
        "weather_api_configured": is_weather_api_configured(),
        "sms_configured": is_sms_configured(),
        "jwt_secret_default": JWT_SECRET == "supersecretjwtkey",
    }
