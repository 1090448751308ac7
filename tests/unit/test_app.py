"""Tests for app construction and configuration."""

from unittest.mock import patch

import pytest

from tests.conftest import StubFetcher
from weather_proxy import create_app
from weather_proxy.errors import ConfigurationError
from weather_proxy.services.weather_api import WeatherAPI


class TestCreateApp:
    def test_missing_api_key_is_fatal(self, test_config):
        test_config['OWM_API_KEY'] = None
        with pytest.raises(ConfigurationError, match="OWM_API_KEY"):
            create_app(test_config)

    def test_builds_owm_client_from_config(self, test_config):
        test_config['OWM_BASE_URL'] = "https://owm.test/weather"
        app = create_app(test_config)
        fetcher = app.extensions['weather_proxy'].service.fetcher
        assert isinstance(fetcher, WeatherAPI)
        assert fetcher.api_key == "test-key"
        assert fetcher.base_url == "https://owm.test/weather"

    @pytest.mark.parametrize("key", ["CACHE_TTL_SECONDS", "SWEEP_INTERVAL_SECONDS"])
    def test_non_positive_timings_rejected(self, test_config, key):
        test_config[key] = 0
        with pytest.raises(ConfigurationError):
            create_app(test_config, fetcher=StubFetcher())

    def test_fresh_components_per_app(self, test_config):
        first = create_app(test_config, fetcher=StubFetcher())
        second = create_app(test_config, fetcher=StubFetcher())
        assert first.extensions['weather_proxy'].store is not second.extensions['weather_proxy'].store

    def test_store_shared_by_service_and_janitor(self, app):
        state = app.extensions['weather_proxy']
        assert state.service.store is state.store
        assert state.janitor.store is state.store
        assert state.janitor.policy is state.policy

    def test_janitor_started_when_enabled(self, test_config):
        test_config['JANITOR_ENABLED'] = True
        app = create_app(test_config, fetcher=StubFetcher())
        janitor = app.extensions['weather_proxy'].janitor
        try:
            assert janitor.running
        finally:
            janitor.shutdown()

    def test_file_logging(self, test_config, tmp_path):
        test_config['LOG_DIR'] = str(tmp_path / "logs")
        app = create_app(test_config, fetcher=StubFetcher())
        handlers = [h for h in app.logger.handlers
                    if getattr(h, "baseFilename", "").endswith("weather_service.log")]
        try:
            assert (tmp_path / "logs").is_dir()
            assert len(handlers) == 1
        finally:
            for h in handlers:
                app.logger.removeHandler(h)
                h.close()

    def test_configured_cors_origin(self, test_config):
        test_config['CORS_ORIGINS'] = ["http://localhost:3000"]
        client = create_app(test_config, fetcher=StubFetcher()).test_client()

        allowed = client.get("/api/cities", headers={"Origin": "http://localhost:3000"})
        other = client.get("/api/cities", headers={"Origin": "http://evil.test"})

        assert allowed.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"
        assert "Access-Control-Allow-Origin" not in other.headers

    def test_factory_does_not_register_exit_hooks(self, test_config):
        test_config['JANITOR_ENABLED'] = True
        with patch("atexit.register") as register:
            app = create_app(test_config, fetcher=StubFetcher())
        janitor = app.extensions['weather_proxy'].janitor
        try:
            assert all(c.args[0] != janitor.shutdown for c in register.call_args_list)
        finally:
            janitor.shutdown()
