from functools import wraps

from flask import jsonify

MAX_CITY_CODE_LENGTH = 10


def validate_city_code(f):
    """
    Decorator checking the `city_code` URL parameter.
    OpenWeatherMap city ids are positive integers.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        city_code = kwargs.get('city_code', '')

        if not (city_code.isascii() and city_code.isdigit()) or len(city_code) > MAX_CITY_CODE_LENGTH:
            return jsonify({
                "error": "Invalid city code",
                "details": f"Must be a numeric OpenWeatherMap city id of at most {MAX_CITY_CODE_LENGTH} digits"
            }), 400

        return f(*args, **kwargs)

    return wrapper
