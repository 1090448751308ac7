"""Exceptions raised by the proxy and the Flask handlers that render them."""

from flask import Flask, g, jsonify


class WeatherProxyError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class FetchError(WeatherProxyError):
    """The weather provider could not deliver a usable payload."""

    def __init__(self, message: str, city_id: str = None,
                 upstream_status: int = None):
        super().__init__(message, status_code=502)
        self.city_id = city_id
        self.upstream_status = upstream_status


class ConfigurationError(WeatherProxyError):
    """A required setting is missing or invalid at startup."""


def register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers on the Flask app."""

    @app.errorhandler(FetchError)
    def handle_fetch_error(e: FetchError):
        return jsonify({
            'error': 'Failed to fetch weather data',
            'details': str(e),
            'city_id': e.city_id,
            'request_id': g.get('request_id'),
        }), e.status_code

    @app.errorhandler(WeatherProxyError)
    def handle_proxy_error(e: WeatherProxyError):
        return jsonify({
            'error': str(e),
            'request_id': g.get('request_id'),
        }), e.status_code

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({
            "error": "Rate limit exceeded",
            "message": str(e.description)
        }), 429
