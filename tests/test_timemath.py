"""Unit tests for wall-clock and duration helpers."""

import unittest

from sunctl.lib.timemath import (
    DURATION_PLACEHOLDER,
    MS_PER_DAY,
    InvalidFormatError,
    format_clock,
    format_duration,
    parse_clock,
    resolve_ramp_duration,
    round_half_up,
    split_clock,
)


class TestParseClock(unittest.TestCase):
    def test_midnight(self):
        self.assertEqual(parse_clock("00:00"), 0)

    def test_morning(self):
        self.assertEqual(parse_clock("06:30"), (6 * 60 + 30) * 60_000)

    def test_single_digit_hour(self):
        self.assertEqual(parse_clock("7:05"), (7 * 60 + 5) * 60_000)

    def test_range_not_checked(self):
        """Out-of-range values still convert; only the shape is checked."""
        self.assertEqual(parse_clock("25:00"), 25 * 60 * 60_000)

    def test_garbage_raises(self):
        for value in ("", "0630", "aa:bb", "06:30:00", "06-30"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidFormatError):
                    parse_clock(value)

    def test_invalid_format_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_clock("nope")

    def test_split_clock(self):
        self.assertEqual(split_clock("06:30"), (6, 30))
        self.assertEqual(split_clock("23:59"), (23, 59))


class TestFormatClock(unittest.TestCase):
    def test_zero_padded(self):
        self.assertEqual(format_clock(7, 30), "07:30")
        self.assertEqual(format_clock(0, 5), "00:05")
        self.assertEqual(format_clock(23, 59), "23:59")


class TestFormatDuration(unittest.TestCase):
    def test_zero_and_negative_are_placeholder(self):
        self.assertEqual(format_duration(0), DURATION_PLACEHOLDER)
        self.assertEqual(format_duration(-60_000), DURATION_PLACEHOLDER)

    def test_minutes_only(self):
        self.assertEqual(format_duration(45 * 60_000), "45 min")

    def test_hours_and_minutes(self):
        self.assertEqual(format_duration(90 * 60_000), "1h 30m")

    def test_whole_hours(self):
        self.assertEqual(format_duration(120 * 60_000), "2h")

    def test_rounds_to_nearest_minute_before_classifying(self):
        self.assertEqual(format_duration(59 * 60_000 + 30_000), "1h")
        self.assertEqual(format_duration(29_999), DURATION_PLACEHOLDER)
        self.assertEqual(format_duration(30_000), "1 min")


class TestResolveRampDuration(unittest.TestCase):
    def test_forward_span_unmodified(self):
        self.assertEqual(resolve_ramp_duration("06:30", "07:15"), 45 * 60_000)

    def test_end_before_start_rolls_over_once(self):
        start, end = "23:30", "00:15"
        naive = parse_clock(end) - parse_clock(start)
        self.assertEqual(resolve_ramp_duration(start, end), naive + MS_PER_DAY)
        self.assertEqual(resolve_ramp_duration(start, end), 45 * 60_000)

    def test_equal_times_are_a_full_day(self):
        self.assertEqual(resolve_ramp_duration("07:00", "07:00"), MS_PER_DAY)

    def test_never_negative(self):
        pairs = [("00:00", "23:59"), ("23:59", "00:00"), ("12:00", "11:59"), ("05:00", "05:01")]
        for start, end in pairs:
            with self.subTest(start=start, end=end):
                self.assertGreater(resolve_ramp_duration(start, end), 0)


class TestRoundHalfUp(unittest.TestCase):
    def test_halves_round_up(self):
        self.assertEqual(round_half_up(12.5), 13)
        self.assertEqual(round_half_up(5.5), 6)
        self.assertEqual(round_half_up(-5.5), -5)

    def test_regular_values(self):
        self.assertEqual(round_half_up(42.0), 42)
        self.assertEqual(round_half_up(-5.0), -5)
        self.assertEqual(round_half_up(0.49), 0)


if __name__ == "__main__":
    unittest.main()
