from .resolver import ForecastResolver
from .timezones import TimeConverter
from .weather import (
    CurrentConditions,
    ForecastSample,
    ForecastSeries,
    RateLimitError,
    WeatherService,
    WeatherServiceError,
)

__all__ = [
    'CurrentConditions',
    'ForecastResolver',
    'ForecastSample',
    'ForecastSeries',
    'RateLimitError',
    'TimeConverter',
    'WeatherService',
    'WeatherServiceError',
]
