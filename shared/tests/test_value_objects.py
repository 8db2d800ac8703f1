from datetime import datetime, timedelta, timezone

from django.test import SimpleTestCase

from shared.domain.value_objects import TimeRange


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TimeRangeTests(SimpleTestCase):
    def test_half_open_overlap(self) -> None:
        morning = TimeRange(utc(2024, 1, 15, 9), utc(2024, 1, 15, 11))
        noon = TimeRange(utc(2024, 1, 15, 11), utc(2024, 1, 15, 13))
        late_morning = TimeRange(utc(2024, 1, 15, 9), utc(2024, 1, 15, 11, 1))

        self.assertFalse(morning.overlaps_with(noon))
        self.assertFalse(noon.overlaps_with(morning))
        self.assertTrue(late_morning.overlaps_with(noon))
        self.assertTrue(noon.overlaps_with(late_morning))

    def test_duration(self) -> None:
        period = TimeRange(utc(2024, 1, 15, 9), utc(2024, 1, 15, 11))
        self.assertEqual(period.duration, timedelta(hours=2))

    def test_invalid_ranges(self) -> None:
        with self.assertRaises(ValueError):
            TimeRange(utc(2024, 1, 15, 9), utc(2024, 1, 15, 9))
        with self.assertRaises(ValueError):
            TimeRange(datetime(2024, 1, 15, 9), datetime(2024, 1, 15, 10))

    def test_different_offsets_compare_by_instant(self) -> None:
        almaty = timezone(timedelta(hours=5))
        local = TimeRange(datetime(2024, 1, 15, 14, tzinfo=almaty), datetime(2024, 1, 15, 15, tzinfo=almaty))
        self.assertTrue(local.overlaps_with(TimeRange(utc(2024, 1, 15, 9), utc(2024, 1, 15, 10))))
