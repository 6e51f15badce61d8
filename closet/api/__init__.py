"""HTTP clients for the weather, geocoding and vision services."""

from .vision_client import VisionClient, VisionServiceError, image_to_data_url
from .weather_client import CurrentConditions, WeatherClient, WeatherRequestError

__all__ = [
    "CurrentConditions",
    "VisionClient",
    "VisionServiceError",
    "WeatherClient",
    "WeatherRequestError",
    "image_to_data_url",
]
