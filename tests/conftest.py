import pytest

from weather_proxy import create_app
from weather_proxy.errors import FetchError
from weather_proxy.utils.cache import CacheStore, FreshnessPolicy
from weather_proxy.services.weather_service import WeatherService
from weather_proxy.services.janitor import CacheJanitor

TTL = 300


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class StubFetcher:
    """Records calls and returns canned payloads per city."""

    def __init__(self, payloads=None):
        self.payloads = payloads or {}
        self.calls = []
        self.fail_with = None

    def fetch(self, city_id):
        self.calls.append(city_id)
        if self.fail_with is not None:
            raise self.fail_with
        return self.payloads.get(city_id, make_payload(city_id))


def make_payload(city_id, temp=306.15, name="Colombo"):
    return {
        "id": int(city_id),
        "name": name,
        "main": {"temp": temp, "temp_min": temp - 1, "temp_max": temp + 1,
                 "humidity": 70, "pressure": 1009},
        "weather": [{"main": "Clouds", "description": "broken clouds"}],
        "visibility": 10000,
        "wind": {"speed": 4.6, "deg": 250},
        "sys": {"country": "LK", "sunrise": 1700000000, "sunset": 1700043000},
        "dt": 1700020000,
    }


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def store(clock):
    return CacheStore(clock=clock)


@pytest.fixture
def policy():
    return FreshnessPolicy(TTL)


@pytest.fixture
def service(fetcher, store, policy, clock):
    return WeatherService(fetcher, store, policy, clock=clock)


@pytest.fixture
def janitor(store, policy, clock):
    j = CacheJanitor(store, policy, interval_seconds=60, clock=clock)
    yield j
    j.shutdown()


@pytest.fixture
def test_config():
    return {
        'TESTING': True,
        'OWM_API_KEY': 'test-key',
        'CACHE_TTL_SECONDS': TTL,
        'SWEEP_INTERVAL_SECONDS': 60,
        'JANITOR_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'LOG_DIR': None,
    }


@pytest.fixture
def app(test_config, fetcher, clock):
    return create_app(test_config, fetcher=fetcher, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def failing_fetcher(fetcher):
    fetcher.fail_with = FetchError("Provider error for city 1248991: boom", city_id="1248991")
    return fetcher
