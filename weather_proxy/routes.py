from datetime import datetime, timezone

from flask import Blueprint, current_app, g, jsonify, request

from weather_proxy.cities import CITIES, city_codes
from weather_proxy.extensions import limiter
from weather_proxy.services.weather_api import extract_weather_info
from weather_proxy.utils.validation import validate_city_code

weather_bp = Blueprint('weather', __name__)


def _service():
    return current_app.extensions['weather_proxy'].service


@weather_bp.before_app_request
def assign_request_id():
    g.request_id = f"req-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S-%f')}"
    current_app.logger.debug(f"Incoming request {g.request_id} from {request.remote_addr}: {request.path}")


@weather_bp.route('/api/weather', methods=['GET'])
def all_weather():
    return jsonify(_service().get_weather_many(city_codes()))


@weather_bp.route('/api/weather/<city_code>', methods=['GET'])
@validate_city_code
@limiter.limit("30 per minute")
def city_weather(city_code):
    return jsonify(_service().get_weather(city_code))


@weather_bp.route('/api/weather/<city_code>/summary', methods=['GET'])
@validate_city_code
@limiter.limit("30 per minute")
def city_weather_summary(city_code):
    return jsonify(extract_weather_info(_service().get_weather(city_code)))


@weather_bp.route('/api/cities', methods=['GET'])
def cities():
    return jsonify({"List": CITIES})


@weather_bp.route('/health')
def health_check():
    state = current_app.extensions['weather_proxy']
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cache_size": state.service.cache_size(),
        "cache_ttl_seconds": state.policy.ttl,
        "janitor_running": state.janitor.running,
    })


@weather_bp.route('/api/cache/clear', methods=['POST'])
def clear_cache():
    _service().clear_cache()
    return jsonify({"message": "Cache cleared successfully"})
