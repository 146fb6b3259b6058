"""
Weather query planning.

A request is resolved once into a WeatherQuery tagged with its QueryKind and
handed to one of three handlers:

- CURRENT:  live conditions
- FORECAST: the first few 3-hour forecast slots
- AT_TIME:  the forecast slot best matching a requested local date/time

Date/time requests are routed by distance from now:
- in the past: rejected
- within WEATHER_CURRENT_WINDOW_HOURS (2h): answered with current conditions
- within WEATHER_FORECAST_HORIZON_DAYS (5 days): resolved against the forecast
- further out: rejected
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Mapping, Optional

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .services import (
    CurrentConditions,
    ForecastResolver,
    ForecastSample,
    TimeConverter,
    WeatherService,
    WeatherServiceError,
)

logger = logging.getLogger(__name__)


class QueryKind(Enum):
    """Kind of weather query."""
    CURRENT = 'current'
    FORECAST = 'forecast'
    AT_TIME = 'at_time'


MODE_ALIASES = {
    '': QueryKind.CURRENT,
    'default': QueryKind.CURRENT,
    'current': QueryKind.CURRENT,
    'forecast': QueryKind.FORECAST,
}


class WeatherQueryError(Exception):
    """Base exception for queries that cannot be answered."""
    status_code = 400


class InvalidQuery(WeatherQueryError):
    """Missing or malformed input, or a time outside the supported window."""


class DataUnavailable(WeatherQueryError):
    """Upstream data could not be fetched."""
    status_code = 404


class NoMatch(WeatherQueryError):
    """The forecast has no slot for the requested day."""
    status_code = 404


@dataclass(frozen=True)
class WeatherQuery:
    city: str
    kind: QueryKind = QueryKind.CURRENT
    requested: Optional[datetime] = None  # naive local moment for AT_TIME


def parse_local_datetime(value: str, converter: TimeConverter) -> datetime:
    """
    Parse an ISO 8601 date/time into a naive local moment.

    A bare date means local midnight. A value carrying an offset is an
    instant and is converted into the local zone.
    """
    value = value.strip()
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                raise InvalidQuery(f"Invalid dateTime {value!r}, expected ISO 8601.")
            parsed = datetime.combine(day, datetime.min.time())
    except ValueError:
        raise InvalidQuery(f"Invalid dateTime {value!r}.")

    try:
        if parsed.tzinfo is not None:
            parsed = converter.to_local(parsed)
        # Both directions must stay inside the datetime range
        converter.to_utc(parsed)
    except (OverflowError, ValueError):
        raise InvalidQuery(f"Invalid dateTime {value!r}, out of range.")
    return parsed


def parse_query(params: Mapping[str, str], converter: TimeConverter) -> WeatherQuery:
    """Validate raw request parameters into a WeatherQuery."""
    city = (params.get('city') or '').strip()
    if not city:
        raise InvalidQuery("City is required.")

    date_time = (params.get('dateTime') or '').strip()
    if date_time:
        requested = parse_local_datetime(date_time, converter)
        return WeatherQuery(city=city, kind=QueryKind.AT_TIME, requested=requested)

    mode = (params.get('mode') or '').strip().lower()
    if mode not in MODE_ALIASES:
        raise InvalidQuery(f"Unknown mode {mode!r}, expected 'forecast' or omitted.")
    return WeatherQuery(city=city, kind=MODE_ALIASES[mode])


def plan_time_query(requested: datetime, now: datetime, converter: TimeConverter) -> QueryKind:
    """Decide how a date/time query is answered, or reject it."""
    current_window = timedelta(hours=getattr(settings, 'WEATHER_CURRENT_WINDOW_HOURS', 2))
    horizon_days = getattr(settings, 'WEATHER_FORECAST_HORIZON_DAYS', 5)

    try:
        ahead = converter.to_utc(requested) - now
    except (OverflowError, ValueError):
        raise InvalidQuery(f"Invalid dateTime {requested.isoformat()!r}, out of range.")
    if ahead < timedelta(0):
        raise InvalidQuery("Past weather data is not supported.")
    if ahead <= current_window:
        return QueryKind.CURRENT
    if ahead <= timedelta(days=horizon_days):
        return QueryKind.AT_TIME
    raise InvalidQuery(f"Forecast available only for the next {horizon_days} days.")


def _format_local(instant: datetime, converter: TimeConverter) -> str:
    return converter.to_local(instant).isoformat()


def _current_payload(city: str, current: CurrentConditions, converter: TimeConverter) -> dict:
    return {
        'city': city,
        'local_timestamp': _format_local(current.observed_at, converter),
        'temperature': current.temperature,
        'humidity': current.humidity,
        'condition': current.condition,
    }


def _sample_payload(sample: ForecastSample, converter: TimeConverter) -> dict:
    return {
        'local_timestamp': _format_local(sample.instant, converter),
        'temperature': sample.temperature,
        'humidity': sample.humidity,
        'condition': sample.condition,
    }


def current_weather(query: WeatherQuery, client: WeatherService, converter: TimeConverter) -> dict:
    try:
        current = client.get_current(query.city)
    except WeatherServiceError as e:
        logger.warning(f"Current weather fetch failed for {query.city}: {e}")
        current = None
    if current is None:
        raise DataUnavailable("Unable to fetch weather data.")
    return _current_payload(query.city, current, converter)


def forecast_list(
    query: WeatherQuery,
    client: WeatherService,
    converter: TimeConverter,
    limit: Optional[int] = None,
) -> dict:
    if limit is None:
        limit = getattr(settings, 'WEATHER_FORECAST_LIST_LIMIT', 3)
    try:
        series = client.get_forecast(query.city)
    except WeatherServiceError as e:
        logger.warning(f"Forecast fetch failed for {query.city}: {e}")
        series = None
    if not series:
        raise DataUnavailable("Unable to fetch forecast data.")
    return {
        'city': query.city,
        'forecasts': [_sample_payload(sample, converter) for sample in series.head(limit)],
    }


def forecast_at(
    query: WeatherQuery,
    client: WeatherService,
    converter: TimeConverter,
    now: Optional[datetime] = None,
) -> dict:
    now = now or timezone.now()
    if plan_time_query(query.requested, now, converter) is QueryKind.CURRENT:
        return current_weather(query, client, converter)

    try:
        series = client.get_forecast(query.city)
    except WeatherServiceError as e:
        logger.warning(f"Forecast fetch failed for {query.city}: {e}")
        series = None
    if series is None:
        raise DataUnavailable("Unable to fetch forecast data.")

    sample = ForecastResolver(converter).resolve(query.requested, series)
    if sample is None:
        raise NoMatch("Forecast not available for requested time.")

    return {
        'city': query.city,
        'requested_local_timestamp': query.requested.isoformat(),
        'weather': _sample_payload(sample, converter),
    }


def run_query(
    query: WeatherQuery,
    client: WeatherService,
    converter: TimeConverter,
    now: Optional[datetime] = None,
) -> dict:
    """Dispatch a parsed query to its handler."""
    if query.kind is QueryKind.AT_TIME:
        return forecast_at(query, client, converter, now=now)
    if query.kind is QueryKind.FORECAST:
        return forecast_list(query, client, converter)
    return current_weather(query, client, converter)
