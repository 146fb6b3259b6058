"""
Management command to run a weather query from the shell.

Usage:
    python manage.py weather Pune                          # Current weather
    python manage.py weather Pune --mode forecast          # Next forecast slots
    python manage.py weather Pune --at 2024-06-01T15:00    # Forecast at a local time
"""

import json

from django.core.management.base import BaseCommand, CommandError

VALID_MODES = ['default', 'forecast']


class Command(BaseCommand):
    help = 'Fetch weather for a city and print the JSON payload'

    def add_arguments(self, parser):
        parser.add_argument('city', help='City name')
        parser.add_argument(
            '--mode',
            choices=VALID_MODES,
            default='default',
            help='Query mode (default: current weather)',
        )
        parser.add_argument(
            '--at',
            dest='date_time',
            help='Local date/time (ISO 8601) to resolve the forecast for',
        )

    def handle(self, *args, **options):
        from apps.weatherbot.queries import WeatherQueryError, parse_query, run_query
        from apps.weatherbot.services import WeatherService
        from apps.weatherbot.views import get_time_converter

        converter = get_time_converter()
        params = {
            'city': options['city'],
            'mode': options['mode'],
            'dateTime': options['date_time'] or '',
        }

        try:
            query = parse_query(params, converter)
            payload = run_query(query, WeatherService(), converter)
        except WeatherQueryError as e:
            raise CommandError(str(e))

        self.stdout.write(json.dumps(payload, indent=2))
