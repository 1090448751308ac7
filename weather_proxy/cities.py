"""Cities shown on the dashboard, keyed by OpenWeatherMap city id."""

CITIES = [
    {"CityCode": "1248991", "CityName": "Colombo", "Temp": "33.0", "Status": "Clouds"},
    {"CityCode": "1850147", "CityName": "Tokyo", "Temp": "8.6", "Status": "Clear"},
    {"CityCode": "2644210", "CityName": "Liverpool", "Temp": "16.5", "Status": "Rain"},
    {"CityCode": "2988507", "CityName": "Paris", "Temp": "22.4", "Status": "Clear"},
    {"CityCode": "2147714", "CityName": "Sydney", "Temp": "27.3", "Status": "Rain"},
    {"CityCode": "4930956", "CityName": "Boston", "Temp": "4.2", "Status": "Mist"},
    {"CityCode": "1796236", "CityName": "Shanghai", "Temp": "10.1", "Status": "Clouds"},
    {"CityCode": "3143244", "CityName": "Oslo", "Temp": "-3.9", "Status": "Clear"},
]


def city_codes():
    return [city["CityCode"] for city in CITIES]
