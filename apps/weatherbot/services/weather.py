"""
OpenWeatherMap Integration Service

Fetches weather data for a city name:
- Current weather (/weather) - live conditions
- 5 day / 3 hour forecast (/forecast) - discrete UTC forecast slots

Responses are parsed into small immutable records here so the rest of the
app never sees the provider's JSON shape. Nothing is cached.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Optional

import httpx
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentConditions:
    """Live conditions for a city."""
    temperature: float  # Celsius with metric units
    humidity: int  # percent
    condition: str
    observed_at: datetime  # UTC


@dataclass(frozen=True)
class ForecastSample:
    """Single 3-hour forecast slot."""
    instant: datetime  # UTC
    temperature: float
    humidity: int
    condition: str


@dataclass(frozen=True)
class ForecastSeries:
    """Forecast slots for one city, ascending by instant."""
    city: str
    samples: tuple[ForecastSample, ...] = ()

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def head(self, count: int) -> tuple[ForecastSample, ...]:
        """First `count` slots of the series."""
        return self.samples[:count]


class WeatherServiceError(Exception):
    """Base exception for weather service errors."""
    pass


class RateLimitError(WeatherServiceError):
    """Raised when the provider answers 429."""
    pass


def _parse_utc(value: str) -> datetime:
    """Parse a provider timestamp like '2024-06-01 03:00:00' as UTC."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt_timezone.utc)
    return parsed.astimezone(dt_timezone.utc)


class WeatherService:
    """Thin client for the OpenWeatherMap REST API."""

    def __init__(self):
        self.api_key = getattr(settings, 'OPENWEATHER_API_KEY', '')
        if not self.api_key:
            raise ImproperlyConfigured("OPENWEATHER_API_KEY is not configured")
        self.base_url = getattr(
            settings, 'OPENWEATHER_BASE_URL', 'https://api.openweathermap.org/data/2.5'
        ).rstrip('/')
        self.units = getattr(settings, 'OPENWEATHER_UNITS', 'metric')
        self.timeout = getattr(settings, 'WEATHER_HTTP_TIMEOUT', 10.0)

    def get_current(self, city: str) -> Optional[CurrentConditions]:
        """Get current conditions for a city, None if the city is unknown."""
        logger.info(f"Fetching current weather for {city}")
        data = self._request('weather', city)
        if data is None:
            return None
        return self._parse_current_response(data)

    def get_forecast(self, city: str) -> Optional[ForecastSeries]:
        """Get the 5 day / 3 hour forecast for a city, None if the city is unknown."""
        logger.info(f"Fetching forecast for {city}")
        data = self._request('forecast', city)
        if data is None:
            return None
        return self._parse_forecast_response(data, city)

    def _request(self, endpoint: str, city: str) -> Optional[dict]:
        """GET an endpoint for a city and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint}"
        params = {'q': city, 'appid': self.api_key, 'units': self.units}

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params=params)

                if response.status_code == 401:
                    raise WeatherServiceError("Invalid API key")
                elif response.status_code == 404:
                    logger.warning(f"City not found: {city}")
                    return None
                elif response.status_code == 429:
                    raise RateLimitError("API rate limit exceeded")
                elif response.status_code != 200:
                    logger.warning(f"OpenWeatherMap {endpoint} error: {response.status_code}")
                    raise WeatherServiceError(f"API error: {response.status_code}")

                return response.json()

        except httpx.TimeoutException:
            raise WeatherServiceError("API request timed out")
        except httpx.RequestError as e:
            raise WeatherServiceError(f"API request failed: {e}")
        except ValueError as e:
            raise WeatherServiceError(f"Invalid JSON from API: {e}")

    def _parse_conditions(self, item: dict) -> tuple[float, int, str]:
        main = item['main']
        weather = item.get('weather') or [{}]
        return (
            float(main['temp']),
            int(main['humidity']),
            weather[0].get('description', ''),
        )

    def _parse_current_response(self, data: dict) -> CurrentConditions:
        """Parse a /weather response into CurrentConditions."""
        try:
            temperature, humidity, condition = self._parse_conditions(data)

            try:
                observed_at = datetime.fromtimestamp(int(data['dt']), tz=dt_timezone.utc)
            except (KeyError, TypeError, ValueError, OverflowError, OSError):
                observed_at = timezone.now()

            return CurrentConditions(
                temperature=temperature,
                humidity=humidity,
                condition=condition,
                observed_at=observed_at,
            )

        except (KeyError, TypeError, ValueError, IndexError, AttributeError, OverflowError, OSError) as e:
            logger.error(f"Failed to parse current weather response: {e}")
            raise WeatherServiceError(f"Failed to parse weather data: {e}")

    def _parse_forecast_response(self, data: dict, city: str) -> ForecastSeries:
        """Parse a /forecast response into a ForecastSeries."""
        try:
            samples = []
            for item in data.get('list') or []:
                if item.get('dt_txt'):
                    instant = _parse_utc(item['dt_txt'])
                else:
                    instant = datetime.fromtimestamp(int(item['dt']), tz=dt_timezone.utc)

                temperature, humidity, condition = self._parse_conditions(item)
                samples.append(ForecastSample(
                    instant=instant,
                    temperature=temperature,
                    humidity=humidity,
                    condition=condition,
                ))

            samples.sort(key=lambda sample: sample.instant)
            return ForecastSeries(city=city, samples=tuple(samples))

        except (KeyError, TypeError, ValueError, IndexError, AttributeError, OverflowError, OSError) as e:
            logger.error(f"Failed to parse forecast response: {e}")
            raise WeatherServiceError(f"Failed to parse forecast data: {e}")
