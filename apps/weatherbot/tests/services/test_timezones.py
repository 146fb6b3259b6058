"""Tests for local/UTC time conversion."""

from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from apps.weatherbot.services.timezones import UTC, TimeConverter

IST_OFFSET = timedelta(hours=5, minutes=30)


class TimeConverterTests(SimpleTestCase):
    """Tests for TimeConverter with the default IST zone."""

    def setUp(self):
        self.converter = TimeConverter('Asia/Kolkata')

    def test_to_utc_subtracts_ist_offset(self):
        result = self.converter.to_utc(datetime(2024, 6, 1, 11, 30))
        self.assertEqual(result, datetime(2024, 6, 1, 6, 0, tzinfo=UTC))

    def test_to_utc_returns_aware_utc(self):
        result = self.converter.to_utc(datetime(2024, 6, 1, 11, 30))
        self.assertEqual(result.utcoffset(), timedelta(0))

    def test_to_utc_crosses_midnight(self):
        result = self.converter.to_utc(datetime(2024, 6, 1, 2, 0))
        self.assertEqual(result, datetime(2024, 5, 31, 20, 30, tzinfo=UTC))

    def test_to_utc_keeps_aware_instant(self):
        instant = datetime(2024, 6, 1, 8, 0, tzinfo=dt_timezone(timedelta(hours=2)))
        self.assertEqual(self.converter.to_utc(instant), datetime(2024, 6, 1, 6, 0, tzinfo=UTC))

    def test_to_local_adds_ist_offset(self):
        result = self.converter.to_local(datetime(2024, 6, 1, 6, 0, tzinfo=UTC))
        self.assertEqual(result, datetime(2024, 6, 1, 11, 30))
        self.assertIsNone(result.tzinfo)

    def test_to_local_treats_naive_as_utc(self):
        result = self.converter.to_local(datetime(2024, 6, 1, 21, 0))
        self.assertEqual(result, datetime(2024, 6, 2, 2, 30))

    def test_round_trip(self):
        moments = [
            datetime(2024, 1, 1, 0, 0),
            datetime(2024, 2, 29, 23, 59),
            datetime(2024, 3, 31, 2, 30),
            datetime(2024, 6, 1, 4, 17, 45),
            datetime(2024, 10, 27, 1, 30),
            datetime(2024, 12, 31, 23, 0, 0, 500),
        ]
        for moment in moments:
            with self.subTest(moment=moment):
                self.assertEqual(self.converter.to_local(self.converter.to_utc(moment)), moment)

    def test_offset_is_fixed_across_the_year(self):
        for month in range(1, 13):
            moment = datetime(2024, month, 15, 12, 0)
            with self.subTest(month=month):
                utc = self.converter.to_utc(moment).replace(tzinfo=None)
                self.assertEqual(moment - utc, IST_OFFSET)

    def test_offset_is_fixed_at_construction(self):
        self.assertEqual(self.converter.offset, IST_OFFSET)

    def test_local_date_uses_local_calendar(self):
        # 20:00 UTC is already the next day in IST
        instant = datetime(2024, 6, 1, 20, 0, tzinfo=UTC)
        self.assertEqual(self.converter.local_date(instant), date(2024, 6, 2))

    def test_unknown_zone_is_configuration_error(self):
        with self.assertRaises(ImproperlyConfigured):
            TimeConverter('Mars/Olympus_Mons')

    def test_zone_directory_name_is_configuration_error(self):
        for name in ('America', '../etc/passwd'):
            with self.subTest(name=name):
                with self.assertRaises(ImproperlyConfigured):
                    TimeConverter(name)


class InjectedZoneTests(SimpleTestCase):
    """TimeConverter accepts any tzinfo, so other zones can be injected."""

    def test_fixed_offset_zone(self):
        converter = TimeConverter(dt_timezone(timedelta(hours=-3)))
        self.assertEqual(
            converter.to_utc(datetime(2024, 6, 1, 21, 0)),
            datetime(2024, 6, 2, 0, 0, tzinfo=UTC),
        )
        self.assertEqual(converter.offset, timedelta(hours=-3))

    def test_utc_zone_is_identity(self):
        converter = TimeConverter('UTC')
        moment = datetime(2024, 6, 1, 12, 0)
        self.assertEqual(converter.to_utc(moment).replace(tzinfo=None), moment)
