"""Pick the forecast sample that best represents a requested local moment."""

import logging
from datetime import datetime
from typing import Optional

from .timezones import TimeConverter
from .weather import ForecastSample, ForecastSeries

logger = logging.getLogger(__name__)


class ForecastResolver:
    """
    Match a requested local moment against a 3-hourly forecast series.

    Only samples on the requested local calendar day are considered. Among
    those the one closest in time wins, ties going to the earlier sample.
    Returns None when the series has nothing for that day.
    """

    def __init__(self, converter: TimeConverter):
        self.converter = converter

    def resolve(self, requested: datetime, series: ForecastSeries) -> Optional[ForecastSample]:
        if not series.samples:
            return None

        requested_utc = self.converter.to_utc(requested)
        requested_date = self.converter.local_date(requested_utc)

        same_day = [
            sample for sample in series.samples
            if self.converter.local_date(sample.instant) == requested_date
        ]
        if not same_day:
            logger.debug(f"No forecast samples on {requested_date} for {series.city}")
            return None

        return min(
            same_day,
            key=lambda sample: (abs(sample.instant - requested_utc), sample.instant),
        )
