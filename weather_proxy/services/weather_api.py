import logging
import time
from typing import Dict, Optional

import requests

from weather_proxy.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"


class WeatherAPI:
    """Client for the OpenWeatherMap current weather endpoint"""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _log_interaction(self, params: Dict, status_code: int, duration: float):
        """Log an OpenWeatherMap API interaction with the key redacted"""
        logger.info(
            "OpenWeatherMap API interaction",
            extra={'data': {
                'api_endpoint': self.base_url,
                'request_params': {**params, 'appid': 'REDACTED'},
                'response_status': status_code,
                'processing_time_sec': round(duration, 3),
            }}
        )

    def fetch(self, city_id: str) -> Dict:
        """
        Fetch current weather for a city.

        Temperatures are left in Kelvin, as the provider returns them
        without a `units` parameter.

        Args:
            city_id: OpenWeatherMap city identifier

        Returns:
            The provider's JSON payload

        Raises:
            FetchError: On network errors, non-200 responses or a payload
                that is not a weather record
        """
        params = {'id': city_id, 'appid': self.api_key}

        api_start = time.time()
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"OpenWeatherMap API timeout for city {city_id}")
            raise FetchError(f"Timed out fetching weather for city {city_id}",
                             city_id=city_id) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"OpenWeatherMap API error for city {city_id}: {e}")
            raise FetchError(f"Network error fetching weather for city {city_id}: {e}",
                             city_id=city_id) from e

        self._log_interaction(params, response.status_code, time.time() - api_start)

        if response.status_code != 200:
            try:
                message = response.json().get('message', 'Unknown error')
            except ValueError:
                message = response.text or 'Unknown error'
            logger.error(f"OpenWeatherMap returned {response.status_code} for city {city_id}: {message}")
            raise FetchError(f"Provider error for city {city_id}: {message}",
                             city_id=city_id, upstream_status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Malformed payload for city {city_id}",
                             city_id=city_id) from e

        if not isinstance(data, dict) or 'main' not in data:
            raise FetchError(f"Malformed payload for city {city_id}: missing weather data",
                             city_id=city_id)

        return data


def extract_weather_info(weather_data: Dict) -> Dict:
    """
    Extract the fields the dashboard displays from a raw payload

    Args:
        weather_data: Raw data from the API

    Returns:
        Flat dict, temperatures in Kelvin and sunrise/sunset in epoch seconds
    """
    if not weather_data:
        return {}

    main = weather_data.get('main', {})
    weather = (weather_data.get('weather') or [{}])[0]
    wind = weather_data.get('wind', {})
    sys_info = weather_data.get('sys', {})

    return {
        'location': weather_data.get('name', 'Unknown'),
        'country': sys_info.get('country'),
        'temperature': main.get('temp'),
        'temp_min': main.get('temp_min'),
        'temp_max': main.get('temp_max'),
        'condition': weather.get('main', ''),
        'description': weather.get('description', ''),
        'humidity': main.get('humidity'),
        'pressure': main.get('pressure'),
        'visibility': weather_data.get('visibility'),
        'wind_speed': wind.get('speed'),
        'wind_deg': wind.get('deg'),
        'sunrise': sys_info.get('sunrise'),
        'sunset': sys_info.get('sunset'),
        'timestamp': weather_data.get('dt')
    }
