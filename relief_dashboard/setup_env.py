#!/usr/bin/env python3
"""
Setup command for the Flood Relief Coordination API
"""
import os

from relief_dashboard import config

ENV_TEMPLATE = """# Flood Relief Coordination API environment variables

# Database (MySQL). Set DATABASE_URL instead to use any SQLAlchemy URL.
DB_USER=root
DB_PASS=
DB_HOST=localhost
DB_NAME=flood_relief

# Auth
JWT_SECRET=change_me
JWT_EXP_MINUTES=1440

# Weather API Configuration (OpenWeatherMap)
OPENWEATHER_API_KEY=your_openweathermap_api_key_here

# Twilio SMS - optional, alerts are logged when unset
TWILIO_SID=
TWILIO_AUTH=
TWILIO_PHONE=

# Comma separated list of dashboard origins
CORS_ORIGINS=http://localhost:3000
LOG_LEVEL=INFO
"""


def create_env_file(path=".env"):
    """Create .env file from template"""
    if os.path.exists(path):
        print(f"⚠  {path} already exists. Skipping creation.")
        return False

    with open(path, "w") as f:
        f.write(ENV_TEMPLATE)
    print(f"✅ Created {path} from template")
    print("📝 Please edit it with your actual credentials")
    return True


def check_configuration():
    """Print current configuration status"""
    status = config.get_config_status()

    print("📊 Configuration Status:")
    print(f"   DATABASE_URL set: {'✅' if status['database_url_set'] else '❌ (using DB_* settings)'}")
    print(f"   Weather API configured: {'✅' if status['weather_api_configured'] else '❌'}")
    print(f"   SMS configured: {'✅' if status['sms_configured'] else '❌ (mock SMS)'}")
    print(f"   JWT secret changed: {'❌' if status['jwt_secret_default'] else '✅'}")

    return status


def main():
    print("🚀 Flood Relief Coordination API Setup")
    print("=" * 50)

    env_created = create_env_file()
    status = check_configuration()

    print("\n" + "=" * 50)
    if not status["weather_api_configured"]:
        print("ℹ  /api/weather returns 500 until OPENWEATHER_API_KEY is set")
    if status["jwt_secret_default"]:
        print("⚠  JWT_SECRET is the development default")

    print("\n🎯 Next Steps:")
    print("1. Edit .env with your database and API credentials")
    print("2. Run 'relief-dashboard' to start the API")
    print("3. Visit http://127.0.0.1:8000/docs in your browser")

    if env_created:
        print("\n💡 Tip: the .env file was just created. Restart after editing it.")


if __name__ == "__main__":
    main()
