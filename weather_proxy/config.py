import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    OWM_API_KEY = os.getenv('OWM_API_KEY')
    OWM_BASE_URL = os.getenv('OWM_BASE_URL', 'https://api.openweathermap.org/data/2.5/weather')
    OWM_TIMEOUT = float(os.getenv('OWM_TIMEOUT', 10))

    # Seconds
    CACHE_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', 5 * 60))
    SWEEP_INTERVAL_SECONDS = int(os.getenv('SWEEP_INTERVAL_SECONDS', 60))
    JANITOR_ENABLED = _env_flag('JANITOR_ENABLED', True)

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')

    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '2000 per day;100 per hour')
    RATELIMIT_ENABLED = _env_flag('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = 'memory://'
