"""
Local civil time <-> UTC conversion.

The service works in a single fixed local zone (IST by default). Instants are
always aware UTC datetimes; local moments are naive datetimes in that zone and
only appear when parsing requests and formatting responses.
"""

from datetime import date, datetime, timezone as dt_timezone, tzinfo
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.core.exceptions import ImproperlyConfigured

UTC = dt_timezone.utc


class TimeConverter:
    """Convert between naive local moments and aware UTC instants."""

    def __init__(self, zone: Union[str, tzinfo]):
        if isinstance(zone, str):
            try:
                zone = ZoneInfo(zone)
            except (ZoneInfoNotFoundError, ValueError, OSError) as e:
                raise ImproperlyConfigured(f"Unknown time zone {zone!r}: {e}")
        self.zone = zone
        self.offset = datetime.now(zone).utcoffset()

    def __repr__(self) -> str:
        return f"TimeConverter({self.zone})"

    def to_utc(self, local: datetime) -> datetime:
        """Interpret a naive local moment in the zone and return the UTC instant."""
        if local.tzinfo is not None:
            return local.astimezone(UTC)
        return local.replace(tzinfo=self.zone).astimezone(UTC)

    def to_local(self, instant: datetime) -> datetime:
        """Return the naive local moment for an instant (naive input is UTC)."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(self.zone).replace(tzinfo=None)

    def local_date(self, instant: datetime) -> date:
        return self.to_local(instant).date()
