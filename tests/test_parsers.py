"""Unit tests for /status parsing and query encoding."""

import json
import unittest

from sunctl.lib.models import DeviceStatus
from sunctl.lib.parsers import (
    build_alarm_params,
    build_on_params,
    build_start_params,
    parse_status,
)

STATUS_BODY = {
    "time": "06:42",
    "alarmEnabled": True,
    "alarmHour": 6,
    "alarmMin": 30,
    "fadeDuration": 2700000,
    "isFading": True,
    "progress": 0.267,
    "utcOffset": -18000,
}


class TestParseStatus(unittest.TestCase):
    def test_parse_firmware_body(self):
        """Body as the lamp firmware serializes it."""
        status = parse_status(json.dumps(STATUS_BODY).encode())

        self.assertEqual(
            status,
            DeviceStatus(
                time="06:42",
                is_fading=True,
                progress=0.267,
                alarm_enabled=True,
                alarm_hour=6,
                alarm_min=30,
                utc_offset=-18000,
                fade_duration=2700000,
            ),
        )

    def test_fade_duration_is_optional(self):
        body = dict(STATUS_BODY)
        del body["fadeDuration"]
        status = parse_status(body)
        self.assertIsNone(status.fade_duration)

    def test_integer_progress_becomes_float(self):
        status = parse_status({**STATUS_BODY, "progress": 0})
        self.assertIsInstance(status.progress, float)
        self.assertEqual(status.progress, 0.0)

    def test_missing_field_raises(self):
        required = ("time", "isFading", "progress", "alarmEnabled", "alarmHour", "alarmMin")
        for key in (*required, "utcOffset"):
            body = {k: v for k, v in STATUS_BODY.items() if k != key}
            with self.subTest(key=key):
                with self.assertRaises(ValueError) as ctx:
                    parse_status(body)
                self.assertIn(key, str(ctx.exception))

    def test_wrong_types_raise(self):
        cases = {
            "isFading": "yes",
            "alarmHour": "6",
            "alarmMin": 30.5,
            "utcOffset": True,
            "progress": None,
            "fadeDuration": "long",
        }
        for key, value in cases.items():
            with self.subTest(key=key):
                with self.assertRaises(ValueError):
                    parse_status({**STATUS_BODY, key: value})

    def test_not_json_raises(self):
        with self.assertRaises(ValueError):
            parse_status(b"<html>nope</html>")

    def test_non_object_raises(self):
        with self.assertRaises(ValueError):
            parse_status(b"[1, 2, 3]")

    def test_non_finite_progress_raises(self):
        for token in ("NaN", "Infinity", "-Infinity", "1e999"):
            body = json.dumps({**STATUS_BODY, "progress": 0.5}).replace("0.5", token)
            with self.subTest(token=token):
                with self.assertRaises(ValueError):
                    parse_status(body.encode())

    def test_non_finite_progress_in_dict_raises(self):
        with self.assertRaises(ValueError):
            parse_status({**STATUS_BODY, "progress": float("inf")})


class TestQueryEncoding(unittest.TestCase):
    def test_on_params(self):
        params = build_on_params(255, 60, 10)
        self.assertEqual(list(params.items()), [("r", 255), ("g", 60), ("b", 10)])

    def test_start_params(self):
        self.assertEqual(build_start_params(3600000), {"time": 3600000})

    def test_alarm_params_in_wire_order(self):
        params = build_alarm_params(hour=6, minute=30, duration=2700000, enabled=True)
        self.assertEqual(
            list(params.items()),
            [("hour", 6), ("min", 30), ("duration", 2700000), ("enabled", 1)],
        )

    def test_alarm_params_disabled_encodes_zero(self):
        self.assertEqual(build_alarm_params(enabled=False), {"enabled": 0})

    def test_alarm_params_only_offset(self):
        self.assertEqual(build_alarm_params(utc_offset=-18000), {"utcoffset": -18000})

    def test_alarm_params_zero_values_kept(self):
        params = build_alarm_params(hour=0, minute=0, utc_offset=0)
        self.assertEqual(params, {"hour": 0, "min": 0, "utcoffset": 0})

    def test_alarm_params_empty_raises(self):
        with self.assertRaises(ValueError):
            build_alarm_params()


if __name__ == "__main__":
    unittest.main()
