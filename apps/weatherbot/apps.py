from django.apps import AppConfig
from django.conf import settings


class WeatherbotConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.weatherbot'
    time_converter = None

    def ready(self):
        from .services import TimeConverter

        # Built once; a zone that can't be resolved fails at startup
        self.time_converter = TimeConverter(
            getattr(settings, 'WEATHER_LOCAL_TIMEZONE', 'Asia/Kolkata')
        )
