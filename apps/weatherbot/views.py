import logging

from django.apps import apps
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.urls import reverse
from django.views.decorators.http import require_GET

from .queries import WeatherQueryError, parse_query, run_query
from .services import TimeConverter, WeatherService

logger = logging.getLogger(__name__)


def get_time_converter() -> TimeConverter:
    """The converter built once by the app config at startup."""
    return apps.get_app_config('weatherbot').time_converter


@require_GET
def health(request):
    """Health check endpoint."""
    return JsonResponse({'status': 'ok'})


@require_GET
def weather(request):
    """
    Current weather, forecast list, or forecast at a local date/time.

    Query params: city (required), mode ('forecast' or omitted), dateTime
    (ISO 8601 in the local zone, takes precedence over mode).
    """
    converter = get_time_converter()
    try:
        query = parse_query(request.GET, converter)
        payload = run_query(query, WeatherService(), converter)
    except WeatherQueryError as e:
        logger.info(f"Weather query rejected ({e.status_code}): {e}")
        return JsonResponse({'detail': str(e)}, status=e.status_code)
    return JsonResponse(payload)


def _weather_parameters() -> list:
    return [
        {
            'name': 'city',
            'in': 'query',
            'required': True,
            'description': 'City name, e.g. "Pune" or "London,GB".',
            'schema': {'type': 'string'},
        },
        {
            'name': 'mode',
            'in': 'query',
            'required': False,
            'description': 'Omit for current weather, "forecast" for the next forecast slots.',
            'schema': {'type': 'string', 'enum': ['default', 'forecast']},
        },
        {
            'name': 'dateTime',
            'in': 'query',
            'required': False,
            'description': 'Local date/time (ISO 8601) to get the matching forecast for.',
            'schema': {'type': 'string', 'format': 'date-time'},
        },
    ]


def _reading_schema() -> dict:
    return {
        'type': 'object',
        'required': ['local_timestamp', 'temperature', 'humidity', 'condition'],
        'properties': {
            'local_timestamp': {'type': 'string', 'format': 'date-time'},
            'temperature': {'type': 'number'},
            'humidity': {'type': 'integer'},
            'condition': {'type': 'string'},
        },
    }


def _response_schemas() -> dict:
    """Payload shapes keyed by the query kind that produces them."""
    current = _reading_schema()
    current = {
        **current,
        'required': ['city', *current['required']],
        'properties': {'city': {'type': 'string'}, **current['properties']},
    }
    return {
        'CurrentWeather': current,
        'ForecastList': {
            'type': 'object',
            'required': ['city', 'forecasts'],
            'properties': {
                'city': {'type': 'string'},
                'forecasts': {'type': 'array', 'items': _reading_schema()},
            },
        },
        'ForecastAtTime': {
            'type': 'object',
            'required': ['city', 'requested_local_timestamp', 'weather'],
            'properties': {
                'city': {'type': 'string'},
                'requested_local_timestamp': {'type': 'string', 'format': 'date-time'},
                'weather': _reading_schema(),
            },
        },
    }


@require_GET
def openapi_schema(request):
    """OpenAPI 3 description of the weather API."""
    error = {
        'content': {'application/json': {'schema': {
            'type': 'object', 'properties': {'detail': {'type': 'string'}},
        }}},
    }
    schemas = _response_schemas()
    schema = {
        'openapi': '3.0.3',
        'info': {
            'title': getattr(settings, 'WEATHER_API_TITLE', 'WeatherBot API'),
            'version': getattr(settings, 'WEATHER_API_VERSION', 'v1'),
            'description': 'Current weather and 5-day forecast using OpenWeatherMap.',
        },
        'paths': {
            reverse('weather'): {
                'get': {
                    'summary': 'Get weather for a city',
                    'parameters': _weather_parameters(),
                    'responses': {
                        '200': {
                            'description': 'Weather payload',
                            'content': {'application/json': {'schema': {'oneOf': [
                                {'$ref': f'#/components/schemas/{name}'} for name in schemas
                            ]}}},
                        },
                        '400': {'description': 'Invalid city, mode or date/time', **error},
                        '404': {'description': 'Weather data not available', **error},
                    },
                },
            },
            reverse('health'): {
                'get': {'summary': 'Health check', 'responses': {'200': {'description': 'OK'}}},
            },
        },
        'components': {'schemas': schemas},
    }
    server_url = getattr(settings, 'WEATHER_API_SERVER_URL', '')
    if server_url:
        schema['servers'] = [{'url': server_url}]
    return JsonResponse(schema)


@require_GET
def api_docs(request):
    """Swagger UI rendering the OpenAPI schema."""
    return render(request, 'weatherbot/swagger_ui.html', {
        'title': getattr(settings, 'WEATHER_API_TITLE', 'WeatherBot API'),
        'schema_url': reverse('openapi_schema'),
    })
