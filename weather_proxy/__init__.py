import time

from flask import Flask
from flask_cors import CORS
from prometheus_client import CollectorRegistry, Gauge
from prometheus_flask_exporter import PrometheusMetrics

from .config import Config
from .errors import ConfigurationError, register_error_handlers
from .extensions import limiter
from .routes import weather_bp
from .services.janitor import CacheJanitor
from .services.weather_api import WeatherAPI
from .services.weather_service import WeatherService
from .utils.cache import CacheStore, FreshnessPolicy
from .utils.logs import setup_logging

__version__ = '1.0.0'


class WeatherProxyState:
    """Cache components owned by one app instance"""

    def __init__(self, store, policy, service, janitor):
        self.store = store
        self.policy = policy
        self.service = service
        self.janitor = janitor


def create_app(test_config=None, fetcher=None, clock=time.time):
    """
    Build the Flask app and its cache components.

    Args:
        test_config: Mapping applied over `Config`
        fetcher: Replacement for the OpenWeatherMap client
        clock: Time source shared by the store, the service and the janitor

    Raises:
        ConfigurationError: If the API key is missing or the cache timings
            are not positive
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config is not None:
        app.config.from_mapping(test_config)

    setup_logging(app)

    if fetcher is None:
        if not app.config.get('OWM_API_KEY'):
            raise ConfigurationError("OWM_API_KEY is not set")
        fetcher = WeatherAPI(
            api_key=app.config['OWM_API_KEY'],
            base_url=app.config['OWM_BASE_URL'],
            timeout=app.config['OWM_TIMEOUT'],
        )

    policy = FreshnessPolicy(app.config['CACHE_TTL_SECONDS'])
    store = CacheStore(clock=clock)
    service = WeatherService(fetcher, store, policy, clock=clock)
    janitor = CacheJanitor(store, policy, app.config['SWEEP_INTERVAL_SECONDS'], clock=clock)
    app.extensions['weather_proxy'] = WeatherProxyState(store, policy, service, janitor)

    CORS(app, origins=app.config['CORS_ORIGINS'])
    limiter.init_app(app)
    register_error_handlers(app)
    app.register_blueprint(weather_bp)

    # Per-app registry so several apps can live in one process
    metrics = PrometheusMetrics(app, registry=CollectorRegistry())
    metrics.info('app_info', 'Weather Proxy Info', version=__version__)
    cache_entries = Gauge('weather_cache_entries', 'Entries currently in the weather cache',
                          registry=metrics.registry)
    cache_entries.set_function(service.cache_size)

    if app.config['JANITOR_ENABLED']:
        janitor.start()

    app.logger.info(f"Cache duration: {policy.ttl} seconds, sweep every {janitor.interval_seconds} seconds")
    return app
